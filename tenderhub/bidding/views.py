import logging
from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from .models import Bidder, Bid, BidItem
from .serializers import (
    BidderSerializer, BidSerializer, BidCreateSerializer, BidStatusSerializer, BidItemSerializer
)
from .filters import BidFilter, BidderFilter
from .services import BidRuleError, create_bid, change_bid_status
from tenderhub.tenders.models import Tender
from tenderhub.core.utils import create_audit_log, field_changes

logger = logging.getLogger('tenderhub.bidding')


def _bid_queryset():
    return Bid.objects.select_related('tender', 'bidder').prefetch_related('items', 'items__tender_item')


# Bidder views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bidder_list_create(request):
    """List bidders (filters: search, verified) or create a bidder"""
    if request.method == 'GET':
        filterset = BidderFilter(request.query_params, queryset=Bidder.objects.all())
        serializer = BidderSerializer(filterset.qs, many=True)
        return Response(serializer.data)
    else:
        serializer = BidderSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bidder_detail(request, pk):
    """Retrieve, update or delete a bidder"""
    bidder = get_object_or_404(Bidder, pk=pk)

    if request.method == 'GET':
        serializer = BidderSerializer(bidder)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = BidderSerializer(bidder, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = field_changes(bidder, serializer.validated_data)
            serializer.save()
            if 'verified' in changes:
                # Verification decides who counts as a qualified bidder
                create_audit_log(
                    request=request,
                    action='update',
                    model_name='Bidder',
                    object_id=bidder.id,
                    object_name=bidder.name,
                    changes=changes,
                )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if bidder.bids.exists():
            return Response({'error': 'Cannot delete bidder with existing bids'}, status=status.HTTP_400_BAD_REQUEST)
        name = bidder.name
        bidder.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Bidder',
            object_id=pk,
            object_name=name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bidder_bids(request, pk):
    """List the bids of a bidder"""
    bidder = get_object_or_404(Bidder, pk=pk)
    serializer = BidSerializer(_bid_queryset().filter(bidder=bidder), many=True)
    return Response(serializer.data)


# Bid views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bid_list_create(request):
    """List bids (filters: status, tender, bidder) or create a bid with its items"""
    if request.method == 'GET':
        filterset = BidFilter(request.query_params, queryset=_bid_queryset())
        serializer = BidSerializer(filterset.qs, many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = BidCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            bid = create_bid(
                tender=data['tender'],
                bidder=data['bidder'],
                items=data['items'],
                status=data['status'],
                notes=data.get('notes', ''),
                request=request,
            )
        except BidRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(BidSerializer(_bid_queryset().get(pk=bid.pk)).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bid_detail(request, pk):
    """Retrieve, update or delete a bid"""
    bid = get_object_or_404(_bid_queryset(), pk=pk)

    if request.method == 'GET':
        serializer = BidSerializer(bid)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = BidSerializer(bid, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(BidSerializer(_bid_queryset().get(pk=pk)).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        label = str(bid)
        bid.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Bid',
            object_id=pk,
            object_name=label,
        )
        logger.info(f"Bid {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticatedOrReadOnly])
def tender_bids(request, pk):
    """List the bids placed on a tender"""
    tender = get_object_or_404(Tender, pk=pk)
    serializer = BidSerializer(_bid_queryset().filter(tender=tender), many=True)
    return Response(serializer.data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bid_status_update(request, pk):
    """Change a bid's status; accepting a bid awards its tender"""
    bid = get_object_or_404(Bid, pk=pk)
    serializer = BidStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid status'}, status=status.HTTP_400_BAD_REQUEST)

    bid = change_bid_status(bid, serializer.validated_data['status'], request=request)
    return Response(BidSerializer(_bid_queryset().get(pk=bid.pk)).data)


@api_view(['GET'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bid_items(request, pk):
    """List the items of a bid"""
    bid = get_object_or_404(Bid, pk=pk)
    serializer = BidItemSerializer(bid.items.select_related('tender_item'), many=True)
    return Response(serializer.data)


# BidItem views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bid_item_list_create(request):
    """List bid items (optionally by bid) or add one to a bid"""
    if request.method == 'GET':
        queryset = BidItem.objects.select_related('tender_item', 'bid')
        bid_id = request.query_params.get('bid', None)
        if bid_id:
            queryset = queryset.filter(bid_id=bid_id)
        serializer = BidItemSerializer(queryset, many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = BidItemSerializer(data=request.data)
        if serializer.is_valid():
            with transaction.atomic():
                item = serializer.save()
                item.bid.recalculate_total()
            return Response(BidItemSerializer(item).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def bid_item_detail(request, pk):
    """Retrieve, update or delete a bid item; the owning bid's total follows"""
    item = get_object_or_404(BidItem.objects.select_related('bid', 'tender_item'), pk=pk)

    if request.method == 'GET':
        serializer = BidItemSerializer(item)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        old_bid = item.bid
        serializer = BidItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            with transaction.atomic():
                item = serializer.save()
                item.bid.recalculate_total()
                if old_bid.pk != item.bid_id:
                    old_bid.recalculate_total()
            return Response(BidItemSerializer(item).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        bid = item.bid
        with transaction.atomic():
            item.delete()
            bid.recalculate_total()
        return Response(status=status.HTTP_204_NO_CONTENT)
