import logging
from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from .models import Tender, TenderItem
from .serializers import (
    TenderSerializer, TenderDetailSerializer, TenderStatusSerializer,
    TenderItemSerializer, TenderItemNestedSerializer
)
from .filters import TenderFilter
from tenderhub.bidding.models import Bid
from tenderhub.core.utils import create_audit_log, field_changes

logger = logging.getLogger('tenderhub.tenders')


def _delete_tender_item(item):
    """Delete a tender item; bids that priced it lose those lines and get their totals recomputed"""
    item_id = item.id
    with transaction.atomic():
        affected_bids = list(Bid.objects.filter(items__tender_item=item).distinct())
        item.delete()
        for bid in affected_bids:
            bid.recalculate_total()
    if affected_bids:
        logger.info(f"Tender item {item_id} removed, recalculated {len(affected_bids)} bid total(s)")


# Tender views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_list_create(request):
    """List tenders (filters: status, category, search) or create a tender with optional items"""
    if request.method == 'GET':
        queryset = Tender.objects.select_related('category', 'created_by').prefetch_related(
            'items', 'items__category'
        ).order_by('-created_at')
        filterset = TenderFilter(request.query_params, queryset=queryset)
        serializer = TenderSerializer(filterset.qs, many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = TenderSerializer(data=request.data)
        if serializer.is_valid():
            tender = serializer.save(created_by=request.user)
            logger.info(f"Tender {tender.id} '{tender.title}' created by {request.user.username}")
            return Response(TenderDetailSerializer(tender).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_detail(request, pk):
    """Retrieve, update or delete a tender"""
    tender = get_object_or_404(
        Tender.objects.select_related('category', 'created_by').prefetch_related('items', 'items__category'),
        pk=pk
    )

    if request.method == 'GET':
        serializer = TenderDetailSerializer(tender)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = TenderSerializer(tender, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = field_changes(
                tender, {k: v for k, v in serializer.validated_data.items() if k != 'items'}
            )
            tender = serializer.save()
            if changes:
                create_audit_log(
                    request=request,
                    action='update',
                    model_name='Tender',
                    object_id=tender.id,
                    object_name=tender.title,
                    changes=changes,
                )
            return Response(TenderDetailSerializer(tender).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        title = tender.title
        tender.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Tender',
            object_id=pk,
            object_name=title,
        )
        logger.info(f"Tender {pk} '{title}' deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PATCH'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_status_update(request, pk):
    """Change the status of a tender"""
    tender = get_object_or_404(Tender, pk=pk)
    serializer = TenderStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid status'}, status=status.HTTP_400_BAD_REQUEST)

    old_status = tender.status
    new_status = serializer.validated_data['status']
    if old_status != new_status:
        tender.status = new_status
        tender.save(update_fields=['status', 'updated_at'])
        create_audit_log(
            request=request,
            action='status_change',
            model_name='Tender',
            object_id=tender.id,
            object_name=tender.title,
            changes={'status': {'old': old_status, 'new': new_status}},
        )
        logger.info(f"Tender {tender.id} status changed {old_status} -> {new_status} by {request.user.username}")

    return Response(TenderSerializer(tender).data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_items(request, pk):
    """List the items of a tender or add several items at once"""
    tender = get_object_or_404(Tender, pk=pk)

    if request.method == 'GET':
        items = tender.items.select_related('category')
        serializer = TenderItemSerializer(items, many=True)
        return Response(serializer.data)
    else:  # POST
        items_data = request.data.get('items') if hasattr(request.data, 'get') else None
        if not isinstance(items_data, list) or not items_data:
            return Response({'error': 'Items array is required'}, status=status.HTTP_400_BAD_REQUEST)

        serializer = TenderItemNestedSerializer(data=items_data, many=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            created = []
            for item_data in serializer.validated_data:
                item_data.setdefault('category', tender.category)
                created.append(TenderItem.objects.create(tender=tender, **item_data))

        return Response(TenderItemSerializer(created, many=True).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_item_remove(request, tender_id, item_id):
    """Delete an item that belongs to the given tender"""
    item = get_object_or_404(TenderItem, pk=item_id, tender_id=tender_id)
    _delete_tender_item(item)
    return Response({'message': 'Tender item deleted successfully'})


# TenderItem views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_item_list_create(request):
    """List tender items (optionally by tender) or create one"""
    if request.method == 'GET':
        queryset = TenderItem.objects.select_related('category', 'tender')
        tender_id = request.query_params.get('tender', None)
        if tender_id:
            queryset = queryset.filter(tender_id=tender_id)
        serializer = TenderItemSerializer(queryset, many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = TenderItemSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_item_detail(request, pk):
    """Retrieve, update or delete a tender item"""
    item = get_object_or_404(TenderItem.objects.select_related('category'), pk=pk)

    if request.method == 'GET':
        serializer = TenderItemSerializer(item)
        return Response(serializer.data)
    elif request.method == 'PUT':
        serializer = TenderItemSerializer(item, data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    elif request.method == 'PATCH':
        serializer = TenderItemSerializer(item, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        _delete_tender_item(item)
        return Response(status=status.HTTP_204_NO_CONTENT)
