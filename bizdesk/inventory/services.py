"""Stock entry operations; each keeps its expense daybook entry in step"""
import logging

from django.db import transaction

from bizdesk.books.models import DaybookEntry
from .models import StockEntry

logger = logging.getLogger('bizdesk.inventory')


def _daybook_description(stock_entry):
    return f"Stock purchase: {stock_entry.product_name}"


def create_stock_entry(user, **data):
    """Create a stock entry together with its expense daybook entry"""
    with transaction.atomic():
        stock_entry = StockEntry.objects.create(owner=user, **data)
        DaybookEntry.objects.create(
            owner=user,
            date=stock_entry.date,
            entry_type='expense',
            amount=stock_entry.amount,
            description=_daybook_description(stock_entry),
            reference=stock_entry.daybook_reference,
            category='Stock',
            stock_entry=stock_entry,
        )
    logger.info("Created stock entry %s for user %s", stock_entry.pk, user.pk)
    return stock_entry


def update_stock_entry(stock_entry, **data):
    """Update a stock entry and rewrite its daybook entry"""
    with transaction.atomic():
        for field, value in data.items():
            setattr(stock_entry, field, value)
        stock_entry.save()
        DaybookEntry.objects.update_or_create(
            stock_entry=stock_entry,
            defaults={
                'owner': stock_entry.owner,
                'date': stock_entry.date,
                'entry_type': 'expense',
                'amount': stock_entry.amount,
                'description': _daybook_description(stock_entry),
                'reference': stock_entry.daybook_reference,
                'category': 'Stock',
            },
        )
    return stock_entry


def delete_stock_entry(stock_entry):
    """Delete a stock entry; its daybook entry goes with it"""
    with transaction.atomic():
        DaybookEntry.objects.filter(stock_entry=stock_entry).delete()
        stock_entry.delete()
