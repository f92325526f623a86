from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import IntegrityError
from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
import calendar
import logging

from bizdesk.core.utils import create_audit_log, get_date_range
from .exceptions import BooksError
from .filters import DaybookEntryFilter, LedgerEntryFilter
from .models import Category, Transaction, MonthHistory, YearHistory, DaybookEntry, LedgerEntry, ICON_BY_TYPE
from .serializers import (
    CategorySerializer, TransactionSerializer, TransactionCreateSerializer,
    DaybookEntrySerializer, LedgerEntrySerializer,
)
from .services import create_transaction, delete_transaction, group_entries_by_date

logger = logging.getLogger('bizdesk.books')

ZERO = Decimal('0.00')
MIN_HISTORY_YEAR = 2000
MAX_HISTORY_YEAR = 2040
RECENT_LEDGER_DAYS = 30


def _error(message, status_code=status.HTTP_400_BAD_REQUEST):
    return Response({'error': message}, status=status_code)


# Transaction views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def transaction_list_create(request):
    """List the user's transactions or record a new one"""
    if request.method == 'GET':
        queryset = Transaction.objects.filter(owner=request.user)
        if request.query_params.get('from') or request.query_params.get('to'):
            try:
                date_from, date_to = get_date_range(request.query_params)
            except ValueError as e:
                return _error(str(e))
            queryset = queryset.filter(date__gte=date_from, date__lte=date_to)
        txn_type = request.query_params.get('type')
        if txn_type:
            if txn_type not in ICON_BY_TYPE:
                return _error("Invalid type parameter")
            queryset = queryset.filter(type=txn_type)
        serializer = TransactionSerializer(queryset.order_by('-date', '-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = TransactionCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            txn = create_transaction(request.user, **serializer.validated_data)
        except BooksError as e:
            logger.warning("Transaction refused for user %s: %s", request.user.pk, e.message)
            return _error(e.message)
        create_audit_log(
            request=request,
            action='transaction_create',
            model_name='Transaction',
            object_id=txn.id,
            object_name=txn.category,
            changes={'type': txn.type, 'amount': str(txn.amount), 'date': txn.date.isoformat()},
        )
        return Response(TransactionSerializer(txn).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def transaction_detail(request, pk):
    """Retrieve a transaction or delete it, reversing its aggregates"""
    txn = get_object_or_404(Transaction, pk=pk, owner=request.user)

    if request.method == 'GET':
        return Response(TransactionSerializer(txn).data)
    else:  # DELETE
        txn_id = txn.id
        changes = {'type': txn.type, 'amount': str(txn.amount), 'date': txn.date.isoformat()}
        delete_transaction(txn)
        create_audit_log(
            request=request,
            action='transaction_delete',
            model_name='Transaction',
            object_id=txn_id,
            changes=changes,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def category_list_create(request):
    """List the user's categories (optionally by type) or create one"""
    if request.method == 'GET':
        queryset = Category.objects.filter(owner=request.user)
        category_type = request.query_params.get('type')
        if category_type:
            if category_type not in ICON_BY_TYPE:
                return _error("Invalid type parameter")
            queryset = queryset.filter(type=category_type)
        serializer = CategorySerializer(queryset.order_by('name'), many=True)
        return Response(serializer.data)
    else:
        serializer = CategorySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        if Category.objects.filter(owner=request.user, name=data['name'], type=data.get('type', 'income')).exists():
            return _error("Category already exists")
        try:
            serializer.save(owner=request.user)
        except IntegrityError:
            return _error("Category already exists")
        return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def category_detail(request, pk):
    """Delete a category; recorded transactions keep their copied name and icon"""
    category = get_object_or_404(Category, pk=pk, owner=request.user)
    category.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


# History views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def history_periods(request):
    """Years that have history, oldest first"""
    years = list(
        YearHistory.objects.filter(owner=request.user)
        .values_list('year', flat=True).distinct().order_by('year')
    )
    if not years:
        years = [timezone.localdate().year]
    return Response(years)


def _parse_int(value, name, low, high):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{name}' must be a number between {low} and {high}")
    if not low <= number <= high:
        raise ValueError(f"'{name}' must be a number between {low} and {high}")
    return number


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def history_data(request):
    """
    Zero-filled income/expense series.

    timeFrame=year gives twelve monthly rows from YearHistory;
    timeFrame=month gives one row per day of the month from MonthHistory.
    """
    time_frame = request.query_params.get('timeFrame')
    if time_frame not in ('month', 'year'):
        return _error("'timeFrame' must be 'month' or 'year'")
    try:
        year = _parse_int(request.query_params.get('year'), 'year', MIN_HISTORY_YEAR, MAX_HISTORY_YEAR)
        month = _parse_int(request.query_params.get('month', 1), 'month', 1, 12)
    except ValueError as e:
        return _error(str(e))

    if time_frame == 'year':
        rows = {
            row.month: row
            for row in YearHistory.objects.filter(owner=request.user, year=year)
        }
        data = []
        for m in range(1, 13):
            row = rows.get(m)
            data.append({
                'year': year,
                'month': m,
                'income': row.income if row else ZERO,
                'expense': row.expense if row else ZERO,
            })
        return Response(data)

    rows = {
        row.day: row
        for row in MonthHistory.objects.filter(owner=request.user, year=year, month=month)
    }
    data = []
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        row = rows.get(day)
        data.append({
            'year': year,
            'month': month,
            'day': day,
            'income': row.income if row else ZERO,
            'expense': row.expense if row else ZERO,
        })
    return Response(data)


# Stats views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stats_balance(request):
    """Income and expense totals over a date range"""
    try:
        date_from, date_to = get_date_range(request.query_params)
    except ValueError as e:
        return _error(str(e))
    totals = Transaction.objects.filter(
        owner=request.user, date__gte=date_from, date__lte=date_to
    ).aggregate(
        income=Sum('amount', filter=Q(type='income')),
        expense=Sum('amount', filter=Q(type='expense')),
    )
    return Response({
        'income': totals['income'] or ZERO,
        'expense': totals['expense'] or ZERO,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stats_categories(request):
    """Per type and category sums over a date range, largest first"""
    try:
        date_from, date_to = get_date_range(request.query_params)
    except ValueError as e:
        return _error(str(e))
    rows = (
        Transaction.objects.filter(owner=request.user, date__gte=date_from, date__lte=date_to)
        .values('type', 'category', 'category_icon')
        .annotate(amount=Sum('amount'))
        .order_by('-amount', 'category')
    )
    return Response([
        {
            'type': row['type'],
            'category': row['category'],
            'category_icon': row['category_icon'],
            'amount': row['amount'],
        }
        for row in rows
    ])


# Daybook views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def daybook_list_create(request):
    """List the user's daybook entries or add one"""
    if request.method == 'GET':
        filterset = DaybookEntryFilter(
            request.query_params,
            queryset=DaybookEntry.objects.filter(owner=request.user).select_related('customer'),
        )
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = DaybookEntrySerializer(filterset.qs.order_by('-date', '-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = DaybookEntrySerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            serializer.save(owner=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def daybook_detail(request, pk):
    """Retrieve, update or delete a daybook entry"""
    entry = get_object_or_404(DaybookEntry, pk=pk, owner=request.user)

    if request.method == 'GET':
        serializer = DaybookEntrySerializer(entry)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        serializer = DaybookEntrySerializer(entry, data=request.data, partial=True, context={'request': request})
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        entry.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def daybook_overdue(request):
    """Pending expenses dated before today, oldest first"""
    entries = DaybookEntry.objects.filter(
        owner=request.user,
        entry_type='expense',
        status='pending',
        date__lt=timezone.localdate(),
    ).select_related('customer').order_by('date', 'created_at')
    serializer = DaybookEntrySerializer(entries, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def daybook_summary(request):
    """Income, expense and balance over a range, with entries grouped by date"""
    try:
        date_from, date_to = get_date_range(request.query_params)
    except ValueError as e:
        return _error(str(e))
    queryset = DaybookEntry.objects.filter(
        owner=request.user, date__gte=date_from, date__lte=date_to
    ).exclude(status='cancelled')
    totals = queryset.aggregate(
        income=Sum('amount', filter=Q(entry_type='income')),
        expense=Sum('amount', filter=Q(entry_type='expense')),
    )
    income = totals['income'] or ZERO
    expense = totals['expense'] or ZERO
    entries = DaybookEntrySerializer(queryset.select_related('customer'), many=True).data
    return Response({
        'from': date_from,
        'to': date_to,
        'income': income,
        'expense': expense,
        'balance': income - expense,
        'days': group_entries_by_date(entries),
    })


# Ledger views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def ledger_list_create(request):
    """List the user's ledger entries (all ledgers or one type) or add one"""
    if request.method == 'GET':
        filterset = LedgerEntryFilter(
            request.query_params,
            queryset=LedgerEntry.objects.filter(owner=request.user).select_related('customer'),
        )
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = LedgerEntrySerializer(filterset.qs.order_by('-date', '-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = LedgerEntrySerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            serializer.save(owner=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def ledger_detail(request, pk):
    """Retrieve or delete a ledger entry"""
    entry = get_object_or_404(LedgerEntry, pk=pk, owner=request.user)

    if request.method == 'GET':
        return Response(LedgerEntrySerializer(entry).data)
    else:  # DELETE
        entry.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


def _credit_debit_totals(queryset):
    totals = queryset.aggregate(
        credits=Sum('amount', filter=Q(transaction_type='CREDIT')),
        debits=Sum('amount', filter=Q(transaction_type='DEBIT')),
        count=Count('id'),
    )
    return totals['credits'] or ZERO, totals['debits'] or ZERO, totals['count']


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ledger_stats(request):
    """Balance, credit/debit totals, per-ledger breakdown and the last 30 days"""
    queryset = LedgerEntry.objects.filter(owner=request.user)
    total_credits, total_debits, total_transactions = _credit_debit_totals(queryset)

    recent_since = timezone.localdate() - timedelta(days=RECENT_LEDGER_DAYS)
    recent_credits, recent_debits, recent_transactions = _credit_debit_totals(queryset.filter(date__gte=recent_since))

    ledger_type_stats = {}
    for row in queryset.values('ledger_type').annotate(
        count=Count('id'),
        credits=Sum('amount', filter=Q(transaction_type='CREDIT')),
        debits=Sum('amount', filter=Q(transaction_type='DEBIT')),
    ).order_by('ledger_type'):
        credits = row['credits'] or ZERO
        debits = row['debits'] or ZERO
        ledger_type_stats[row['ledger_type']] = {
            'count': row['count'],
            'credits': credits,
            'debits': debits,
            'balance': credits - debits,
        }

    return Response({
        'total_balance': total_credits - total_debits,
        'total_credits': total_credits,
        'total_debits': total_debits,
        'total_transactions': total_transactions,
        'recent_credits': recent_credits,
        'recent_debits': recent_debits,
        'recent_transactions': recent_transactions,
        'ledger_type_stats': ledger_type_stats,
        'last_updated': timezone.now(),
    })
