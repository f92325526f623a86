from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Prefetch, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone
from decimal import Decimal
import logging

from bizdesk.core.utils import create_audit_log, parse_date_param
from bizdesk.parties.models import Customer
from bizdesk.parties.serializers import CustomerSerializer
from .models import Sale, Installment
from .serializers import (
    SaleSerializer, SaleUpdateSerializer,
    InstallmentSerializer, InstallmentPaymentSerializer,
)
from .services import (
    SaleError, create_sale, update_sale, delete_sale,
    pay_installment, update_installment, delete_installment,
)

logger = logging.getLogger('bizdesk.sales')

ZERO = Decimal('0.00')


def _sale_queryset(user):
    return (
        Sale.objects.filter(owner=user)
        .select_related('customer', 'item')
        .prefetch_related('installments')
    )


def _installment_queryset(user):
    return Installment.objects.filter(sale__owner=user).select_related('sale', 'sale__customer', 'sale__item', 'paid_by')


# Sale views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_list_create(request):
    """List the user's sales or create a new installment sale"""
    if request.method == 'GET':
        queryset = _sale_queryset(request.user)
        customer = request.query_params.get('customer', None)
        status_filter = request.query_params.get('status', None)
        if customer:
            queryset = queryset.filter(customer_id=customer)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        serializer = SaleSerializer(queryset.order_by('-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = SaleSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            sale = create_sale(request.user, **serializer.validated_data)
        except SaleError as e:
            logger.warning("Sale creation refused for user %s: %s", request.user.pk, e.message)
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

        create_audit_log(
            request=request,
            action='sale_create',
            model_name='Sale',
            object_id=sale.id,
            object_name=sale.item.name,
            object_reference=sale.reference,
            changes={
                'customer': sale.customer_id,
                'total_amount': str(sale.total_amount),
                'advance_amount': str(sale.advance_amount),
                'duration': sale.duration,
            },
        )
        sale = _sale_queryset(request.user).get(pk=sale.pk)
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def sale_detail(request, pk):
    """Retrieve, update or delete a sale; edits are refused once an installment is paid"""
    sale = get_object_or_404(_sale_queryset(request.user), pk=pk)

    if request.method == 'GET':
        serializer = SaleSerializer(sale)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        serializer = SaleUpdateSerializer(sale, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            update_sale(sale, **serializer.validated_data)
        except SaleError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request,
            action='sale_update',
            model_name='Sale',
            object_id=sale.id,
            object_reference=sale.reference,
            changes={key: str(value) for key, value in serializer.validated_data.items()},
        )
        sale = _sale_queryset(request.user).get(pk=sale.pk)
        return Response(SaleSerializer(sale).data)
    else:  # DELETE
        sale_id = sale.id
        reference = sale.reference
        try:
            delete_sale(sale)
        except SaleError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request,
            action='sale_delete',
            model_name='Sale',
            object_id=sale_id,
            object_reference=reference,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


# Installment views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def installment_list(request):
    """List installments with optional sale/status/due date filters"""
    queryset = _installment_queryset(request.user)

    sale = request.query_params.get('sale', None)
    status_filter = request.query_params.get('status', None)
    try:
        due_date = parse_date_param(request.query_params.get('due_date'))
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    if sale:
        queryset = queryset.filter(sale_id=sale)
    if status_filter:
        queryset = queryset.filter(status=status_filter.upper())
    if due_date:
        queryset = queryset.filter(due_date=due_date)

    serializer = InstallmentSerializer(queryset.order_by('due_date', 'id'), many=True)
    return Response(serializer.data)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def installment_detail(request, pk):
    """Retrieve, edit or delete an unpaid installment"""
    installment = get_object_or_404(_installment_queryset(request.user), pk=pk)

    if request.method == 'GET':
        serializer = InstallmentSerializer(installment)
        return Response(serializer.data)
    elif request.method == 'PUT':
        serializer = InstallmentSerializer(installment, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = {key: value for key, value in serializer.validated_data.items() if key in ('amount', 'due_date', 'notes')}
        try:
            installment = update_installment(installment, **data)
        except SaleError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(InstallmentSerializer(installment).data)
    else:  # DELETE
        try:
            delete_installment(installment)
        except SaleError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def installment_pay(request, pk):
    """Record payment of an installment"""
    installment = get_object_or_404(_installment_queryset(request.user), pk=pk)
    serializer = InstallmentPaymentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        installment, daybook_entry, ledger_entry = pay_installment(
            installment, request.user, serializer.validated_data['payment_mode']
        )
    except SaleError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='installment_pay',
        model_name='Installment',
        object_id=installment.id,
        object_reference=installment.sale.reference,
        changes={'amount': str(installment.amount), 'payment_mode': installment.payment_mode},
    )
    return Response({
        'installment': InstallmentSerializer(installment).data,
        'daybook_entry_id': daybook_entry.id,
        'ledger_entry_id': ledger_entry.id if ledger_entry else None,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def installments_due(request):
    """Pending installments due today or earlier, grouped by customer"""
    today = timezone.localdate()
    due = list(
        _installment_queryset(request.user)
        .filter(status='PENDING', due_date__lte=today)
        .order_by('due_date', 'id')
    )

    by_customer = {}
    for installment in due:
        customer = installment.sale.customer
        group = by_customer.setdefault(customer.id, {
            'customer': {'id': customer.id, 'name': customer.name, 'phone': customer.phone},
            'installments': [],
            'total_due': ZERO,
        })
        group['installments'].append(InstallmentSerializer(installment).data)
        group['total_due'] += installment.amount

    return Response({
        'total_due_amount': sum((i.amount for i in due), ZERO),
        'customer_due_installments': list(by_customer.values()),
        'due_installments': InstallmentSerializer(due, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def customer_statement(request, pk):
    """Statement of a customer's sales, installments and outstanding balance"""
    customer = get_object_or_404(Customer, pk=pk, owner=request.user)
    sales = (
        Sale.objects.filter(owner=request.user, customer=customer)
        .select_related('item')
        .prefetch_related(Prefetch('installments', queryset=Installment.objects.order_by('due_date', 'id')))
        .order_by('-created_at')
    )

    sale_rows = []
    total_sales = ZERO
    total_paid = ZERO
    for sale in sales:
        installments = list(sale.installments.all())
        paid = sum((i.amount for i in installments if i.status == 'PAID'), ZERO)
        total_sales += sale.total_amount
        total_paid += paid + sale.advance_amount
        sale_rows.append({
            'id': sale.id,
            'reference': sale.reference,
            'date': sale.created_at,
            'item': sale.item.name,
            'total_amount': sale.total_amount,
            'advance_amount': sale.advance_amount,
            'remaining_amount': sale.remaining_amount - paid,
            'status': sale.status,
            'installments': [
                {
                    'id': i.id,
                    'due_date': i.due_date,
                    'amount': i.amount,
                    'status': i.status,
                    'paid_at': i.paid_at,
                }
                for i in installments
            ],
        })

    return Response({
        'customer': CustomerSerializer(customer).data,
        'sales': sale_rows,
        'summary': {
            'total_sales': total_sales,
            'total_paid': total_paid,
            'total_due': total_sales - total_paid,
        },
        'generated_at': timezone.now(),
    })
