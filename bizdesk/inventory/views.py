from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Avg, Count, F, Sum, DecimalField, ExpressionWrapper
from django.shortcuts import get_object_or_404
from decimal import Decimal
import logging

from .filters import InventoryItemFilter
from .models import InventoryItem, StockEntry
from .serializers import InventoryItemSerializer, StockEntrySerializer
from .services import create_stock_entry, update_stock_entry, delete_stock_entry

logger = logging.getLogger('bizdesk.inventory')

LOW_STOCK_THRESHOLD = 10
ZERO = Decimal('0.00')


def _item_queryset(user):
    return InventoryItem.objects.filter(owner=user).annotate(
        purchase_items_count=Count('purchase_items', distinct=True),
        sales_count=Count('sales', distinct=True),
    )


def _stock_value_expression():
    return ExpressionWrapper(F('quantity') * F('price'), output_field=DecimalField(max_digits=14, decimal_places=2))


def build_item_metrics(item):
    """Purchase/sales metrics shown on the item detail page"""
    purchase_totals = item.purchase_items.aggregate(
        total_value=Sum('total_price'),
        total_quantity=Sum('quantity'),
    )
    total_purchase_value = purchase_totals['total_value'] or ZERO
    total_quantity_purchased = purchase_totals['total_quantity'] or 0
    total_sales_value = item.sales.aggregate(total=Sum('total_amount'))['total'] or ZERO

    avg_purchase_price = ZERO
    turnover_ratio = 0
    if total_quantity_purchased > 0:
        avg_purchase_price = (total_purchase_value / total_quantity_purchased).quantize(Decimal('0.01'))
        turnover_ratio = round((total_quantity_purchased - item.quantity) / total_quantity_purchased, 4)

    return {
        'total_purchase_value': total_purchase_value,
        'total_sales_value': total_sales_value,
        'total_quantity_purchased': total_quantity_purchased,
        'avg_purchase_price': avg_purchase_price,
        'current_value': item.quantity * item.unit_value,
        'estimated_profit': total_sales_value - total_purchase_value,
        'is_low_stock': item.quantity <= LOW_STOCK_THRESHOLD,
        'is_out_of_stock': item.quantity == 0,
        'turnover_ratio': turnover_ratio,
    }


# InventoryItem views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_list_create(request):
    """List the user's inventory or create a new item"""
    if request.method == 'GET':
        filterset = InventoryItemFilter(request.query_params, queryset=_item_queryset(request.user))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = InventoryItemSerializer(filterset.qs.order_by('name'), many=True)
        return Response(serializer.data)
    else:
        serializer = InventoryItemSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            serializer.save(owner=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_detail(request, pk):
    """Retrieve (with metrics), update or delete an inventory item"""
    item = get_object_or_404(_item_queryset(request.user), pk=pk)

    if request.method == 'GET':
        data = InventoryItemSerializer(item).data
        data['metrics'] = build_item_metrics(item)
        return Response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InventoryItemSerializer(
            item, data=request.data, partial=request.method == 'PATCH', context={'request': request}
        )
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if item.purchase_items_count or item.sales_count:
            return Response(
                {'error': 'Cannot delete inventory item with associated purchases or sales. '
                          'Please remove related transactions first.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_stats(request):
    """Headline inventory numbers"""
    queryset = InventoryItem.objects.filter(owner=request.user)
    total_value = queryset.aggregate(total=Sum(_stock_value_expression()))['total'] or ZERO
    return Response({
        'total_items': queryset.count(),
        'total_value': total_value,
        'in_stock_count': queryset.filter(quantity__gt=0).count(),
        'out_of_stock_count': queryset.filter(quantity=0).count(),
        'low_stock_count': queryset.filter(quantity__lte=F('min_stock')).count(),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_categories(request):
    """Per-category statistics plus an overview"""
    queryset = InventoryItem.objects.filter(owner=request.user)
    rows = queryset.values('category').annotate(
        item_count=Count('id'),
        total_quantity=Sum('quantity'),
        avg_price=Avg('price'),
        avg_cost_price=Avg('cost_price'),
    ).order_by('category')

    categories = [
        {
            'name': row['category'] or 'Uncategorized',
            'item_count': row['item_count'],
            'total_quantity': row['total_quantity'] or 0,
            'avg_price': round(row['avg_price'] or ZERO, 2),
            'avg_cost_price': round(row['avg_cost_price'] or ZERO, 2),
        }
        for row in rows
    ]
    return Response({
        'categories': categories,
        'overview': {
            'total_items': queryset.count(),
            'total_categories': len(categories),
            'low_stock_items': queryset.filter(quantity__lte=LOW_STOCK_THRESHOLD).count(),
            'out_of_stock_items': queryset.filter(quantity=0).count(),
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_category_overview(request):
    """Item count and stock value per category"""
    rows = InventoryItem.objects.filter(owner=request.user).values('category').annotate(
        item_count=Count('id'),
        total_value=Sum(_stock_value_expression()),
    ).order_by('category')
    return Response([
        {
            'category': row['category'],
            'item_count': row['item_count'],
            'total_value': row['total_value'] or ZERO,
        }
        for row in rows
    ])


# StockEntry views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def stock_list_create(request):
    """List the user's stock entries or record a new one"""
    if request.method == 'GET':
        entries = StockEntry.objects.filter(owner=request.user).select_related('daybook_entry').order_by('-date', '-created_at')
        serializer = StockEntrySerializer(entries, many=True)
        return Response(serializer.data)
    else:
        serializer = StockEntrySerializer(data=request.data)
        if serializer.is_valid():
            stock_entry = create_stock_entry(request.user, **serializer.validated_data)
            return Response(StockEntrySerializer(stock_entry).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def stock_detail(request, pk):
    """Retrieve, update or delete a stock entry"""
    stock_entry = get_object_or_404(StockEntry, pk=pk, owner=request.user)

    if request.method == 'GET':
        serializer = StockEntrySerializer(stock_entry)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        serializer = StockEntrySerializer(stock_entry, data=request.data, partial=True)
        if serializer.is_valid():
            stock_entry = update_stock_entry(stock_entry, **serializer.validated_data)
            return Response(StockEntrySerializer(stock_entry).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        delete_stock_entry(stock_entry)
        return Response(status=status.HTTP_204_NO_CONTENT)
