"""
Purchase operations.

A purchase touches four tables: the Purchase itself, its expense daybook
entry, the InventoryItem it stocks (matched by product name) and the
PurchaseItem linking the two. Every operation here changes them together.
"""
import logging
from decimal import Decimal

from django.db import transaction

from bizdesk.books.models import DaybookEntry
from bizdesk.inventory.models import InventoryItem
from .models import Purchase, PurchaseItem

logger = logging.getLogger('bizdesk.purchasing')

DEFAULT_MARKUP = Decimal('1.2')
DEFAULT_CATEGORY = 'General'
DAYBOOK_CATEGORY = 'Inventory Purchase'


def _daybook_fields(purchase):
    return {
        'owner': purchase.owner,
        'date': purchase.date,
        'entry_type': 'expense',
        'amount': purchase.total_amount,
        'description': f"Purchase: {purchase.product_name}",
        'reference': purchase.reference,
        'category': DAYBOOK_CATEGORY,
        'payment_method': purchase.payment_method.lower(),
        'status': 'completed',
        'notes': purchase.notes or f"Purchased {purchase.quantity} units of {purchase.product_name}",
    }


def _stock_inventory(purchase):
    """Add the purchase to inventory, creating the item when needed, and link them"""
    item = (
        InventoryItem.objects.select_for_update()
        .filter(owner=purchase.owner, name=purchase.product_name)
        .first()
    )
    if item is None:
        item = InventoryItem.objects.create(
            owner=purchase.owner,
            name=purchase.product_name,
            description=purchase.description,
            quantity=purchase.quantity,
            price=purchase.unit_price,
            cost_price=purchase.unit_price,
            selling_price=(purchase.unit_price * DEFAULT_MARKUP).quantize(Decimal('0.01')),
            category=purchase.category or DEFAULT_CATEGORY,
            supplier=purchase.supplier.name if purchase.supplier else '',
        )
    else:
        item.quantity += purchase.quantity
        item.cost_price = purchase.unit_price
        item.save(update_fields=['quantity', 'cost_price', 'updated_at'])

    return PurchaseItem.objects.create(
        purchase=purchase,
        inventory_item=item,
        quantity=purchase.quantity,
        unit_price=purchase.unit_price,
        total_price=purchase.quantity * purchase.unit_price,
    )


def _unstock_inventory(purchase):
    """Take the purchase's quantities back out of inventory (never below zero) and drop the links"""
    for link in purchase.items.select_related('inventory_item'):
        item = InventoryItem.objects.select_for_update().get(pk=link.inventory_item_id)
        item.quantity = max(0, item.quantity - link.quantity)
        item.save(update_fields=['quantity', 'updated_at'])
    purchase.items.all().delete()


def create_purchase(user, **data):
    """Create a purchase with its daybook entry and inventory effect"""
    if not data.get('total_amount'):
        data['total_amount'] = data['quantity'] * data['unit_price']

    with transaction.atomic():
        purchase = Purchase.objects.create(owner=user, **data)
        DaybookEntry.objects.create(purchase=purchase, **_daybook_fields(purchase))
        _stock_inventory(purchase)

    logger.info("Created purchase %s (%s x %s) for user %s",
                purchase.pk, purchase.quantity, purchase.product_name, user.pk)
    return purchase


def update_purchase(purchase, **data):
    """
    Update a purchase. When the quantity or product changes the old inventory
    effect is reverted and the new one applied; the daybook entry is always synced.
    """
    restock = (
        ('quantity' in data and data['quantity'] != purchase.quantity) or
        ('product_name' in data and data['product_name'] != purchase.product_name)
    )

    with transaction.atomic():
        for field, value in data.items():
            setattr(purchase, field, value)
        if 'total_amount' not in data and ('quantity' in data or 'unit_price' in data):
            purchase.total_amount = purchase.quantity * purchase.unit_price
        purchase.save()

        DaybookEntry.objects.update_or_create(purchase=purchase, defaults=_daybook_fields(purchase))

        if restock:
            _unstock_inventory(purchase)
            _stock_inventory(purchase)
        elif 'unit_price' in data:
            purchase.items.update(
                unit_price=purchase.unit_price,
                total_price=purchase.quantity * purchase.unit_price,
            )

    return purchase


def delete_purchase(purchase):
    """Revert the inventory effect and delete the purchase with its links and daybook entry"""
    purchase_id = purchase.pk
    with transaction.atomic():
        _unstock_inventory(purchase)
        DaybookEntry.objects.filter(purchase=purchase).delete()
        purchase.delete()
    logger.info("Deleted purchase %s", purchase_id)
