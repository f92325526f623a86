import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum, Count, F
from django.db.models.functions import TruncDate
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal

from bizdesk.core.cache_utils import cached_dashboard
from bizdesk.inventory.models import InventoryItem
from bizdesk.parties.models import Customer
from bizdesk.purchasing.models import Purchase
from bizdesk.sales.models import Sale, Installment

logger = logging.getLogger('bizdesk.reports')

TARGET_FACTOR = 1.2
CHART_DAYS = 31
DAILY_STATS_DAYS = 7
DUE_WINDOW_DAYS = 30
DUE_PAYMENTS_LIMIT = 10
CATEGORY_TYPES = ('inventory', 'sales', 'revenue')
UNCATEGORIZED = 'Uncategorized'


def _sum(queryset, field):
    return queryset.aggregate(total=Sum(field))['total'] or Decimal('0.00')


def _month_bounds(day):
    """First and last date of the month containing `day`"""
    start = day.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)


def _metric(name, current, growth=0.0):
    current = float(current)
    target = current * TARGET_FACTOR
    return {
        'metric': name,
        'current': current,
        'target': target,
        'percentage': min(100.0, current / target * 100) if target else 0.0,
        'growth': growth,
        'trend': 'up' if growth >= 0 else 'down',
    }


@cached_dashboard('overview')
def build_overview(user):
    today = timezone.localdate()
    month_start, month_end = _month_bounds(today)
    prev_start, prev_end = _month_bounds(month_start - timedelta(days=1))

    sales = Sale.objects.filter(owner=user)
    current_sales = _sum(sales.filter(created_at__date__gte=month_start, created_at__date__lte=month_end), 'total_amount')
    prev_sales = _sum(sales.filter(created_at__date__gte=prev_start, created_at__date__lte=prev_end), 'total_amount')
    if prev_sales == 0:
        growth = 100.0
    else:
        growth = float((current_sales - prev_sales) / prev_sales * 100)

    customers = Customer.objects.filter(owner=user).count()
    inventory_quantity = InventoryItem.objects.filter(owner=user).aggregate(total=Sum('quantity'))['total'] or 0

    return [
        _metric('Revenue', current_sales, growth),
        _metric('Sales', current_sales, growth),
        _metric('Customers', customers),
        _metric('Inventory', inventory_quantity),
    ]


@cached_dashboard('stats')
def build_stats(user):
    today = timezone.localdate()
    pending = Installment.objects.filter(sale__owner=user, status='PENDING')

    total_due = _sum(pending, 'amount')
    total_sales = _sum(Sale.objects.filter(owner=user), 'total_amount')
    total_purchases = _sum(Purchase.objects.filter(owner=user), 'total_amount')

    due_payments = []
    upcoming = pending.filter(
        due_date__gte=today,
        due_date__lte=today + timedelta(days=DUE_WINDOW_DAYS),
    ).select_related('sale', 'sale__customer').order_by('due_date', '-amount')[:DUE_PAYMENTS_LIMIT]
    for installment in upcoming:
        customer = installment.sale.customer
        due_payments.append({
            'id': installment.id,
            'customer_name': customer.name,
            'customer_email': customer.email,
            'customer_phone': customer.phone,
            'amount': float(installment.amount),
            'due_date': installment.due_date.isoformat(),
            'reference': installment.sale.reference,
            'original_amount': float(installment.sale.total_amount),
            'days_until_due': (installment.due_date - today).days,
            'is_overdue': installment.due_date < today,
        })

    return {
        'total_due_amount': float(total_due),
        'total_profit': float(total_sales - total_purchases),
        'payment_stats': {
            'overdue': pending.filter(due_date__lt=today).count(),
            'due_today': pending.filter(due_date=today).count(),
            'due_this_week': pending.filter(due_date__gte=today, due_date__lte=today + timedelta(days=7)).count(),
        },
        'due_payments': due_payments,
    }


def _daily_totals(queryset, since, value_field=None):
    """{date: (sum, count)} of a queryset grouped by creation date"""
    rows = queryset.filter(created_at__date__gte=since).annotate(day=TruncDate('created_at')).values('day')
    if value_field:
        rows = rows.annotate(total=Sum(value_field), count=Count('id'))
    else:
        rows = rows.annotate(count=Count('id'))
    return {
        row['day']: (row.get('total') or Decimal('0.00'), row['count'])
        for row in rows
    }


@cached_dashboard('chart-data')
def build_chart_data(user):
    today = timezone.localdate()
    since = today - timedelta(days=CHART_DAYS - 1)

    sales = _daily_totals(Sale.objects.filter(owner=user), since, 'total_amount')
    purchases = _daily_totals(Purchase.objects.filter(owner=user), since, 'total_amount')
    customers = _daily_totals(Customer.objects.filter(owner=user), since)

    daily_data = []
    for offset in range(CHART_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_sales, sales_count = sales.get(day, (Decimal('0.00'), 0))
        day_purchases, purchases_count = purchases.get(day, (Decimal('0.00'), 0))
        daily_data.append({
            'date': day.isoformat(),
            'label': day.strftime('%b %d'),
            'sales': float(day_sales),
            'sales_count': sales_count,
            'purchases': float(day_purchases),
            'purchases_count': purchases_count,
            'customers': customers.get(day, (None, 0))[1],
            'profit': float(day_sales - day_purchases),
        })

    total_sales = sum(point['sales'] for point in daily_data)
    total_purchases = sum(point['purchases'] for point in daily_data)
    return {
        'daily_data': daily_data,
        'summary': {
            'total_sales': total_sales,
            'total_purchases': total_purchases,
            'total_customers': sum(point['customers'] for point in daily_data),
            'average_daily_sales': total_sales / CHART_DAYS,
            'average_daily_profit': (total_sales - total_purchases) / CHART_DAYS,
        },
    }


@cached_dashboard('daily-stats')
def build_daily_stats(user):
    today = timezone.localdate()
    since = today - timedelta(days=DAILY_STATS_DAYS - 1)
    sales = _daily_totals(Sale.objects.filter(owner=user), since, 'total_amount')

    data = []
    for offset in range(DAILY_STATS_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        revenue, orders = sales.get(day, (Decimal('0.00'), 0))
        data.append({
            'date': day.isoformat(),
            'day': day.strftime('%a'),
            'orders': orders,
            'revenue': float(revenue),
        })
    return data


@cached_dashboard('categories')
def build_categories(user, category_type='inventory'):
    if category_type == 'inventory':
        rows = (
            InventoryItem.objects.filter(owner=user)
            .values('category')
            .annotate(value=Sum('quantity'), count=Count('id'))
        )
    else:
        # 'sales' and 'revenue' both group sale totals by the sold item's category
        rows = (
            Sale.objects.filter(owner=user)
            .values(category=F('item__category'))
            .annotate(value=Sum('total_amount'), count=Count('id'))
        )

    data = [
        {
            'name': row['category'] or UNCATEGORIZED,
            'value': float(row['value'] or 0),
            'count': row['count'],
        }
        for row in rows
    ]
    data.sort(key=lambda entry: entry['value'], reverse=True)

    total = sum(entry['value'] for entry in data)
    for entry in data:
        entry['percentage'] = round(entry['value'] / total * 100) if total else 0

    return {
        'data': data,
        'type': category_type,
        'summary': {
            'total_categories': len(data),
            'total_value': total,
            'top_category': data[0]['name'] if data else 'None',
        },
    }


# Dashboard endpoints
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_overview(request):
    """Revenue this month against last month, customer count and stock on hand"""
    return Response({'data': build_overview(request.user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Outstanding installments, profit and the next due payments"""
    return Response(build_stats(request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_chart_data(request):
    """Daily sales, purchases, new customers and profit for the last 31 days"""
    return Response(build_chart_data(request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_daily_stats(request):
    """Sales per weekday over the last 7 days"""
    return Response({'data': build_daily_stats(request.user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_categories(request):
    """Value, count and share per category of inventory, sales or revenue"""
    category_type = request.query_params.get('type', 'inventory')
    if category_type not in CATEGORY_TYPES:
        return Response({'error': 'Invalid type parameter'}, status=status.HTTP_400_BAD_REQUEST)
    payload = dict(build_categories(request.user, category_type=category_type))
    payload['timestamp'] = timezone.now().isoformat()
    return Response(payload)
