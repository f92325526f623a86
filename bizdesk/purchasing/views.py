from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
import logging

from bizdesk.core.utils import create_audit_log, is_admin_user, parse_date_param
from .models import Purchase
from .serializers import PurchaseSerializer
from .services import create_purchase, update_purchase, delete_purchase

logger = logging.getLogger('bizdesk.purchasing')


def _purchase_queryset(user):
    return (
        Purchase.objects.filter(owner=user)
        .select_related('supplier', 'daybook_entry')
        .prefetch_related('items', 'items__inventory_item')
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_list_create(request):
    """List the user's purchases or record a new purchase"""
    if request.method == 'GET':
        queryset = _purchase_queryset(request.user)

        supplier = request.query_params.get('supplier', None)
        status_filter = request.query_params.get('status', None)
        try:
            date_from = parse_date_param(request.query_params.get('date_from'))
            date_to = parse_date_param(request.query_params.get('date_to'))
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        if supplier:
            queryset = queryset.filter(supplier_id=supplier)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        if date_from:
            queryset = queryset.filter(date__gte=date_from)
        if date_to:
            queryset = queryset.filter(date__lte=date_to)

        serializer = PurchaseSerializer(queryset.order_by('-date', '-created_at'), many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = PurchaseSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            purchase = create_purchase(request.user, **serializer.validated_data)
            create_audit_log(
                request=request,
                action='purchase_create',
                model_name='Purchase',
                object_id=purchase.id,
                object_name=purchase.product_name,
                object_reference=purchase.reference,
                changes={'quantity': purchase.quantity, 'total_amount': str(purchase.total_amount)},
            )
            purchase = _purchase_queryset(request.user).get(pk=purchase.pk)
            return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_detail(request, pk):
    """Retrieve, update or delete (admin only) a purchase"""
    purchase = get_object_or_404(_purchase_queryset(request.user), pk=pk)

    if request.method == 'GET':
        serializer = PurchaseSerializer(purchase)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        serializer = PurchaseSerializer(purchase, data=request.data, partial=True, context={'request': request})
        if serializer.is_valid():
            update_purchase(purchase, **serializer.validated_data)
            create_audit_log(
                request=request,
                action='purchase_update',
                model_name='Purchase',
                object_id=purchase.id,
                object_name=purchase.product_name,
                object_reference=purchase.reference,
                changes={key: str(value) for key, value in serializer.validated_data.items()},
            )
            purchase = _purchase_queryset(request.user).get(pk=purchase.pk)
            return Response(PurchaseSerializer(purchase).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if not is_admin_user(request.user):
            return Response({'error': 'Admin access required'}, status=status.HTTP_403_FORBIDDEN)
        purchase_id = purchase.id
        product_name = purchase.product_name
        reference = purchase.reference
        delete_purchase(purchase)
        create_audit_log(
            request=request,
            action='purchase_delete',
            model_name='Purchase',
            object_id=purchase_id,
            object_name=product_name,
            object_reference=reference,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
