import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from django.shortcuts import get_object_or_404
from .models import Category, InventoryCategory
from .serializers import CategorySerializer, InventoryCategorySerializer
from tenderhub.core.utils import create_audit_log

logger = logging.getLogger('tenderhub.catalog')


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def category_list_create(request):
    """List all categories or create a new category"""
    if request.method == 'GET':
        queryset = Category.objects.select_related('parent').prefetch_related('children')

        cat_type = request.query_params.get('cat_type', None)
        if cat_type:
            queryset = queryset.filter(cat_type=cat_type)

        parent = request.query_params.get('parent', None)
        if parent == 'root':
            queryset = queryset.filter(parent__isnull=True)
        elif parent:
            queryset = queryset.filter(parent_id=parent)

        serializer = CategorySerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = CategorySerializer(data=request.data)
        if serializer.is_valid():
            category = serializer.save()
            logger.info(f"Category '{category.name}' created by {request.user.username}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = get_object_or_404(Category.objects.select_related('parent'), pk=pk)

    if request.method == 'GET':
        serializer = CategorySerializer(category)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CategorySerializer(category, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if category.children.exists():
            return Response({'error': 'Cannot delete category with subcategories'}, status=status.HTTP_400_BAD_REQUEST)
        if category.has_dependents():
            return Response(
                {'error': 'Cannot delete category with associated items, tenders or tender items'},
                status=status.HTTP_400_BAD_REQUEST
            )

        category_name = category.name
        category.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Category',
            object_id=pk,
            object_name=category_name,
        )
        logger.info(f"Category {pk} ({category_name}) deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


# InventoryCategory views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def inventory_category_list_create(request):
    """List all inventory categories or create a new one"""
    if request.method == 'GET':
        categories = InventoryCategory.objects.all()
        serializer = InventoryCategorySerializer(categories, many=True)
        return Response(serializer.data)
    else:
        serializer = InventoryCategorySerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def inventory_category_detail(request, pk):
    """Retrieve, update or delete an inventory category"""
    category = get_object_or_404(InventoryCategory, pk=pk)

    if request.method == 'GET':
        serializer = InventoryCategorySerializer(category)
        return Response(serializer.data)
    elif request.method == 'PUT':
        serializer = InventoryCategorySerializer(category, data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    elif request.method == 'PATCH':
        serializer = InventoryCategorySerializer(category, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        category.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
