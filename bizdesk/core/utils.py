"""Shared helpers: audit logging, admin checks and query-param parsing"""
import logging
from datetime import date, datetime, timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, sale_create, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object
        object_reference: Reference identifier (e.g., sale reference, invoice number)
    """
    if not action or not model_name or object_id is None:
        logger.warning(
            "Audit log creation skipped: missing required fields (action=%s, model_name=%s, object_id=%s)",
            action, model_name, object_id,
        )
        return None

    audit_user = user
    if audit_user is None and request is not None:
        audit_user = getattr(request, 'user', None)

    try:
        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=get_client_ip(request) if request else None,
        )
    except Exception:
        # Audit logging must never fail the main operation
        logger.exception("Failed to create audit log for %s %s", model_name, object_id)
        return None


def is_admin_user(user):
    """
    Check if user is an admin user.
    Returns True if the user is in the 'Admin' group or is superuser/staff.
    """
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser or user.is_staff:
        return True
    return user.groups.filter(name='Admin').exists()


def parse_date_param(value):
    """
    Parse a query-param date. Accepts YYYY-MM-DD or a full ISO datetime.
    Returns None for empty values and raises ValueError for garbage.
    """
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(value)
    if parsed is None:
        parsed_dt = parse_datetime(value)
        if parsed_dt is None:
            raise ValueError(f"Invalid date: {value}")
        parsed = parsed_dt.date()
    return parsed


def get_date_range(query_params, default_days=30, from_key='from', to_key='to'):
    """Return (date_from, date_to) from query params, defaulting to the last `default_days` days"""
    date_to = parse_date_param(query_params.get(to_key)) or timezone.localdate()
    date_from = parse_date_param(query_params.get(from_key)) or (date_to - timedelta(days=default_days))
    if date_from > date_to:
        raise ValueError("'from' must be on or before 'to'")
    return date_from, date_to
