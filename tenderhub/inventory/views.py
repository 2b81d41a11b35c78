import logging
from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from .models import InventoryItem
from .serializers import InventoryItemSerializer
from .filters import InventoryItemFilter
from .importers import InventoryImportError, import_csv
from tenderhub.core.utils import create_audit_log

logger = logging.getLogger('tenderhub.inventory')


def _validation_failed(serializer):
    return Response({
        'success': False,
        'message': 'Validation failed',
        'errors': serializer.errors,
    }, status=status.HTTP_400_BAD_REQUEST)


# InventoryItem views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def inventory_item_list_create(request):
    """List inventory items ordered by item number or create a new item"""
    if request.method == 'GET':
        queryset = InventoryItem.objects.select_related('category').order_by('item_no')
        filterset = InventoryItemFilter(request.query_params, queryset=queryset)
        serializer = InventoryItemSerializer(filterset.qs, many=True)
        return Response(serializer.data)
    else:
        serializer = InventoryItemSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        item = serializer.save()
        logger.info(f"Inventory item {item.item_no} created by {request.user.username}")
        return Response({
            'success': True,
            'message': 'Item created successfully',
            'data': InventoryItemSerializer(item).data,
        }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def inventory_item_detail(request, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(InventoryItem.objects.select_related('category'), pk=pk)

    if request.method == 'GET':
        serializer = InventoryItemSerializer(item)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InventoryItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return _validation_failed(serializer)
        item = serializer.save()
        return Response({
            'success': True,
            'message': 'Item updated successfully',
            'data': InventoryItemSerializer(item).data,
        })
    else:  # DELETE
        item_no = item.item_no
        item.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='InventoryItem',
            object_id=pk,
            object_name=item_no,
        )
        return Response({
            'success': True,
            'message': 'Item deleted successfully',
        })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def inventory_item_bulk_import(request):
    """Import inventory items from an uploaded CSV file (multipart field ``file``)"""
    uploaded = request.FILES.get('file')
    if uploaded is None:
        return Response({'success': False, 'message': 'No file uploaded'}, status=status.HTTP_400_BAD_REQUEST)

    if not uploaded.name.lower().endswith('.csv'):
        return Response({
            'success': False,
            'message': 'Error uploading file',
            'error': 'Only CSV files are allowed',
        }, status=status.HTTP_400_BAD_REQUEST)

    if uploaded.size > settings.INVENTORY_IMPORT_MAX_BYTES:
        return Response({
            'success': False,
            'message': 'File upload error',
            'error': 'File too large',
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        created, errors = import_csv(uploaded.read())
    except InventoryImportError as e:
        return Response({'success': False, 'message': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='bulk_import',
        model_name='InventoryItem',
        object_id=uploaded.name[:100],
        object_name=uploaded.name,
        changes={'imported': len(created), 'failed': len(errors)},
    )
    logger.info(f"Bulk import of {uploaded.name} by {request.user.username}: {len(created)} imported, {len(errors)} failed")

    payload = {
        'success': True,
        'message': 'Items imported successfully' if created else 'No items were imported',
        'imported': len(created),
        'failed': len(errors),
        'items': InventoryItemSerializer(created, many=True).data,
    }
    if errors:
        payload['errors'] = errors
    return Response(payload)
