from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count, Sum
from django.shortcuts import get_object_or_404
from decimal import Decimal

from bizdesk.core.utils import create_audit_log
from .filters import InvoiceFilter
from .models import Invoice
from .serializers import InvoiceSerializer


def _invoice_queryset(user):
    return Invoice.objects.filter(owner=user).select_related('customer').prefetch_related('items')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def invoice_list_create(request):
    """List the user's invoices or create a new draft invoice"""
    if request.method == 'GET':
        filterset = InvoiceFilter(request.query_params, queryset=_invoice_queryset(request.user))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = InvoiceSerializer(filterset.qs.order_by('-issue_date', '-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = InvoiceSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            invoice = serializer.save(owner=request.user)
            create_audit_log(
                request=request,
                action='invoice_create',
                model_name='Invoice',
                object_id=invoice.id,
                object_name=invoice.invoice_number,
                object_reference=invoice.invoice_number,
                changes={'total': str(invoice.total)},
            )
            return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def invoice_detail(request, pk):
    """Retrieve, update or delete an invoice"""
    invoice = get_object_or_404(_invoice_queryset(request.user), pk=pk)

    if request.method == 'GET':
        serializer = InvoiceSerializer(invoice)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        serializer = InvoiceSerializer(invoice, data=request.data, partial=True, context={'request': request})
        if serializer.is_valid():
            serializer.save()
            invoice = _invoice_queryset(request.user).get(pk=invoice.pk)
            return Response(InvoiceSerializer(invoice).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        invoice.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invoice_stats(request):
    """Invoice counts and amounts by status"""
    queryset = Invoice.objects.filter(owner=request.user)
    by_status = {
        row['status']: row
        for row in queryset.values('status').annotate(count=Count('id'), amount=Sum('total'))
    }

    def status_totals(key):
        row = by_status.get(key, {})
        return row.get('count', 0), row.get('amount') or Decimal('0.00')

    paid_count, paid_amount = status_totals('paid')
    sent_count, sent_amount = status_totals('sent')
    overdue_count, overdue_amount = status_totals('overdue')
    draft_count, draft_amount = status_totals('draft')

    return Response({
        'total_invoices': queryset.count(),
        'total_amount': queryset.aggregate(total=Sum('total'))['total'] or Decimal('0.00'),
        'paid_count': paid_count,
        'paid_amount': paid_amount,
        'pending_count': sent_count,
        'pending_amount': sent_amount,
        'overdue_count': overdue_count,
        'overdue_amount': overdue_amount,
        'draft_count': draft_count,
        'draft_amount': draft_amount,
    })
