"""
Cache invalidation signals
Invalidate a user's dashboard cache when data feeding the dashboard changes
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from bizdesk.inventory.models import InventoryItem, StockEntry
from bizdesk.parties.models import Customer
from bizdesk.purchasing.models import Purchase
from bizdesk.sales.models import Sale, Installment

from .cache_utils import invalidate_dashboard_cache

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender=Sale)
@receiver([post_save, post_delete], sender=Purchase)
@receiver([post_save, post_delete], sender=Customer)
@receiver([post_save, post_delete], sender=InventoryItem)
@receiver([post_save, post_delete], sender=StockEntry)
def invalidate_owner_dashboard(sender, instance, **kwargs):
    """Invalidate the owner's dashboard when an owned record changes"""
    invalidate_dashboard_cache(instance.owner_id)


@receiver([post_save, post_delete], sender=Installment)
def invalidate_installment_dashboard(sender, instance, **kwargs):
    """Installments are owned through their sale"""
    try:
        owner_id = instance.sale.owner_id
    except Sale.DoesNotExist:
        # Sale already gone during a cascade delete; its own signal covers it
        return
    invalidate_dashboard_cache(owner_id)
