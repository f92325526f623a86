"""
Bookkeeping services.

create_transaction() is the single write path for categorised transactions:
the Transaction row and its MonthHistory/YearHistory aggregates are written
in one database transaction, so either all three are visible or none is.
"""
import logging
from collections import OrderedDict, defaultdict
from datetime import date as date_cls, datetime, timezone as dt_timezone
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import F
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import CategoryNotFound, TransactionValidationError
from .models import Category, Transaction, MonthHistory, YearHistory, ICON_BY_TYPE

logger = logging.getLogger('bizdesk.books')

AUTO_PROVISIONED_KEYWORDS = ('bank', 'ledger')
ZERO = Decimal('0.00')


def normalize_amount(amount):
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise TransactionValidationError("Amount must be a number")
    if not value.is_finite() or value <= 0:
        raise TransactionValidationError("Amount must be greater than 0")
    return value.quantize(Decimal('0.01'))


def normalize_date(value):
    """Return a calendar date; aware datetimes are converted to UTC first"""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt_timezone.utc)
        return value.date()
    if isinstance(value, date_cls):
        return value
    if isinstance(value, str) and value:
        parsed = parse_datetime(value)
        if parsed is not None:
            return normalize_date(parsed)
        parsed = parse_date(value)
        if parsed is not None:
            return parsed
    raise TransactionValidationError("Invalid date")


def resolve_category(user, name, type):
    """
    Find the user's category, provisioning bank/ledger categories on demand.
    Raises CategoryNotFound for any other missing category.
    """
    category = Category.objects.filter(owner=user, name=name, type=type).first()
    if category is not None:
        return category

    lowered = name.lower()
    if any(keyword in lowered for keyword in AUTO_PROVISIONED_KEYWORDS):
        category, created = Category.objects.get_or_create(
            owner=user, name=name, type=type,
            defaults={'icon': ICON_BY_TYPE[type]},
        )
        if created:
            logger.info("Auto-provisioned %s category %r for user %s", type, name, user.pk)
        return category

    raise CategoryNotFound()


def _bump_aggregate(model, lookup, income, expense):
    """Upsert one aggregate row, adding income/expense to whatever is stored"""
    row, created = model.objects.select_for_update().get_or_create(
        **lookup, defaults={'income': income, 'expense': expense}
    )
    if not created:
        model.objects.filter(pk=row.pk).update(
            income=F('income') + income,
            expense=F('expense') + expense,
        )
    return row


def apply_to_history(user, day, type, amount):
    """Add (or with a negative amount, remove) a contribution to both aggregates"""
    income = amount if type == 'income' else ZERO
    expense = amount if type == 'expense' else ZERO
    _bump_aggregate(
        MonthHistory,
        {'owner': user, 'day': day.day, 'month': day.month, 'year': day.year},
        income, expense,
    )
    _bump_aggregate(
        YearHistory,
        {'owner': user, 'month': day.month, 'year': day.year},
        income, expense,
    )


def create_transaction(user, amount, category, date, type, description=''):
    """
    Record a categorised income/expense transaction.

    Raises:
        TransactionValidationError: invalid amount, type, category name or date
        CategoryNotFound: the category does not exist and is not auto-provisioned
    """
    if type not in ICON_BY_TYPE:
        raise TransactionValidationError("Type must be 'income' or 'expense'")
    category_name = (category or '').strip()
    if not category_name:
        raise TransactionValidationError("Category is required")
    amount = normalize_amount(amount)
    day = normalize_date(date)

    with transaction.atomic():
        resolved = resolve_category(user, category_name, type)
        txn = Transaction.objects.create(
            owner=user,
            amount=amount,
            description=description or '',
            date=day,
            type=type,
            category=resolved.name,
            category_icon=resolved.icon,
        )
        apply_to_history(user, day, type, amount)

    logger.info("Created %s transaction %s of %s for user %s", type, txn.pk, amount, user.pk)
    return txn


def delete_transaction(txn):
    """Delete a transaction and take its contribution back out of the aggregates"""
    with transaction.atomic():
        apply_to_history(txn.owner, txn.date, txn.type, -txn.amount)
        txn.delete()


def rebuild_history(user):
    """Recompute a user's MonthHistory and YearHistory rows from their Transactions"""
    daily = defaultdict(lambda: [ZERO, ZERO])
    for txn in Transaction.objects.filter(owner=user).only('date', 'type', 'amount').iterator():
        totals = daily[txn.date]
        if txn.type == 'income':
            totals[0] += txn.amount
        else:
            totals[1] += txn.amount

    monthly = defaultdict(lambda: [ZERO, ZERO])
    for day, (income, expense) in daily.items():
        totals = monthly[(day.year, day.month)]
        totals[0] += income
        totals[1] += expense

    with transaction.atomic():
        MonthHistory.objects.filter(owner=user).delete()
        YearHistory.objects.filter(owner=user).delete()
        MonthHistory.objects.bulk_create([
            MonthHistory(owner=user, day=day.day, month=day.month, year=day.year, income=income, expense=expense)
            for day, (income, expense) in daily.items()
        ])
        YearHistory.objects.bulk_create([
            YearHistory(owner=user, month=month, year=year, income=income, expense=expense)
            for (year, month), (income, expense) in monthly.items()
        ])
    return len(daily), len(monthly)


def group_entries_by_date(entries):
    """Group daybook entries by date, newest date first"""
    grouped = OrderedDict()
    for entry in sorted(entries, key=lambda e: (e['date'], e.get('id') or 0), reverse=True):
        grouped.setdefault(entry['date'], []).append(entry)
    return [
        {
            'date': day,
            'entries': day_entries,
            'income': sum((Decimal(e['amount']) for e in day_entries if e['entry_type'] == 'income'), ZERO),
            'expense': sum((Decimal(e['amount']) for e in day_entries if e['entry_type'] == 'expense'), ZERO),
        }
        for day, day_entries in grouped.items()
    ]
