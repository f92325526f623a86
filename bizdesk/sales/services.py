"""
Sale and installment operations.

Creating a sale writes the Sale, its installment schedule, the advance
payment's daybook entry and the stock decrement in one database transaction.
Paying an installment writes the payment, its daybook entry and (for bank
payments) a ledger credit the same way.
"""
import calendar
import logging
from datetime import date
from decimal import Decimal, ROUND_DOWN

from django.db import transaction
from django.utils import timezone

from bizdesk.books.models import DaybookEntry, LedgerEntry
from bizdesk.inventory.models import InventoryItem
from .models import Sale, Installment

logger = logging.getLogger('bizdesk.sales')

CENT = Decimal('0.01')


class SaleError(Exception):
    """Base class; the message is returned to the client as {"error": message}"""
    default_message = "Sale operation failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InsufficientStock(SaleError):
    default_message = "Item is out of stock"


class InstallmentLocked(SaleError):
    default_message = "Installment is already paid"


def add_months(start, months):
    """Same day `months` later, clamped to the last day of a shorter month"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def split_amount(total, parts):
    """Split `total` into `parts` cent amounts; the last part absorbs the rounding remainder"""
    share = (total / parts).quantize(CENT, rounding=ROUND_DOWN)
    amounts = [share] * parts
    amounts[-1] = total - share * (parts - 1)
    return amounts


def build_schedule(sale, start=None):
    """Replace the sale's installments with `duration` monthly ones for the remaining amount"""
    start = start or timezone.localdate()
    sale.installments.all().delete()
    remaining = sale.remaining_amount
    if remaining <= 0:
        return []
    return Installment.objects.bulk_create([
        Installment(sale=sale, amount=amount, due_date=add_months(start, number), status='PENDING')
        for number, amount in enumerate(split_amount(remaining, sale.duration), start=1)
    ])


def create_sale(user, customer, item, total_amount, duration, advance_amount=Decimal('0.00'), payment_mode='CASH', reference=''):
    """
    Create a sale with its installment schedule.

    Raises:
        SaleError: advance larger than the total
        InsufficientStock: the item has no stock left
    """
    if advance_amount > total_amount:
        raise SaleError("Advance amount cannot exceed the total amount")

    with transaction.atomic():
        item = InventoryItem.objects.select_for_update().get(pk=item.pk)
        if item.quantity <= 0:
            raise InsufficientStock(f"{item.name} is out of stock")

        sale = Sale.objects.create(
            owner=user,
            customer=customer,
            item=item,
            reference=reference,
            total_amount=total_amount,
            advance_amount=advance_amount,
            payment_mode=payment_mode,
            duration=duration,
            status='active' if total_amount > advance_amount else 'completed',
        )
        if not sale.reference:
            sale.reference = f"SALE-{sale.pk}"
            sale.save(update_fields=['reference'])

        build_schedule(sale)

        _sync_advance_entry(sale)

        item.quantity -= 1
        item.save(update_fields=['quantity', 'updated_at'])

    logger.info("Created sale %s for customer %s (total %s, %s installments)",
                sale.reference, customer.pk, total_amount, duration)
    return sale


def _sync_advance_entry(sale):
    """Keep the advance income entry in step with the sale's advance amount and payment mode"""
    entries = DaybookEntry.objects.filter(sale=sale, installment__isnull=True)
    if sale.advance_amount <= 0:
        entries.delete()
        return
    payment_method = sale.payment_mode.lower()
    if entries.update(amount=sale.advance_amount, payment_method=payment_method):
        return
    DaybookEntry.objects.create(
        owner=sale.owner,
        date=timezone.localdate(),
        entry_type='income',
        amount=sale.advance_amount,
        description=f"Advance payment for sale {sale.reference}",
        reference=sale.reference,
        category='Sales',
        payment_method=payment_method,
        status='completed',
        customer=sale.customer,
        sale=sale,
    )


def ensure_unpaid(sale, action):
    if sale.installments.filter(status='PAID').exists():
        raise InstallmentLocked(f"Cannot {action} sale with paid installments")


def update_sale(sale, **data):
    """Update an unpaid sale; a changed total, advance or duration regenerates the schedule"""
    with transaction.atomic():
        sale = Sale.objects.select_for_update().get(pk=sale.pk)
        ensure_unpaid(sale, 'edit')

        reschedule = any(
            field in data and data[field] != getattr(sale, field)
            for field in ('total_amount', 'advance_amount', 'duration')
        )
        for field, value in data.items():
            setattr(sale, field, value)
        if sale.advance_amount > sale.total_amount:
            raise SaleError("Advance amount cannot exceed the total amount")
        if reschedule:
            sale.status = 'active' if sale.remaining_amount > 0 else 'completed'
        sale.save()

        if reschedule:
            build_schedule(sale)
        _sync_advance_entry(sale)

    return sale


def delete_sale(sale):
    """Delete an unpaid sale, its advance daybook entry, and put the item back in stock"""
    with transaction.atomic():
        sale = Sale.objects.select_for_update().get(pk=sale.pk)
        ensure_unpaid(sale, 'delete')
        DaybookEntry.objects.filter(sale=sale).delete()
        item = InventoryItem.objects.select_for_update().get(pk=sale.item_id)
        item.quantity += 1
        item.save(update_fields=['quantity', 'updated_at'])
        sale.delete()


def pay_installment(installment, user, payment_mode):
    """
    Mark an installment paid and record the payment.

    Raises:
        InstallmentLocked: the installment is already paid
    """
    with transaction.atomic():
        installment = (
            Installment.objects.select_for_update()
            .select_related('sale', 'sale__customer')
            .get(pk=installment.pk)
        )
        if installment.is_paid:
            raise InstallmentLocked("Installment already paid")

        sale = installment.sale
        today = timezone.localdate()
        installment.status = 'PAID'
        installment.payment_mode = payment_mode
        installment.paid_at = timezone.now()
        installment.paid_by = user
        installment.save()

        daybook_entry = DaybookEntry.objects.create(
            owner=sale.owner,
            date=today,
            entry_type='income',
            amount=installment.amount,
            description=f"Installment payment for sale ({sale.reference})",
            reference=sale.reference,
            category='Installments',
            payment_method=payment_mode.lower(),
            status='completed',
            customer=sale.customer,
            installment=installment,
            sale=sale,
        )

        ledger_entry = None
        if payment_mode == 'BANK':
            ledger_entry = LedgerEntry.objects.create(
                owner=sale.owner,
                ledger_type='BANK',
                title=f"Installment Payment ({sale.reference})",
                description="Installment payment for sale",
                amount=installment.amount,
                transaction_type='CREDIT',
                date=today,
                reference=sale.reference,
                category='Installments',
                payment_method='BANK',
                customer=sale.customer,
            )

        if not sale.installments.exclude(status='PAID').exists():
            sale.status = 'completed'
            sale.save(update_fields=['status', 'updated_at'])

    logger.info("Installment %s of sale %s paid by %s", installment.pk, sale.reference, payment_mode)
    return installment, daybook_entry, ledger_entry


def _lock_unpaid_installment(installment, action):
    installment = Installment.objects.select_for_update().select_related('sale').get(pk=installment.pk)
    if installment.is_paid:
        raise InstallmentLocked(f"Cannot {action} paid installment")
    return installment


def update_installment(installment, **data):
    with transaction.atomic():
        installment = _lock_unpaid_installment(installment, 'edit')
        for field, value in data.items():
            setattr(installment, field, value)
        installment.save()
    return installment


def delete_installment(installment):
    """Delete an unpaid installment; a sale left with nothing unpaid is completed"""
    with transaction.atomic():
        installment = _lock_unpaid_installment(installment, 'delete')
        sale = installment.sale
        installment.delete()
        if not sale.installments.exclude(status='PAID').exists():
            sale.status = 'completed'
            sale.save(update_fields=['status', 'updated_at'])
