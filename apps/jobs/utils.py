import math
from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings


EARTH_RADIUS_KM = 6371.0
CENTS = Decimal('0.01')


def _rate(percentage):
    return Decimal(str(percentage)) / Decimal(100)


def calculate_commission(amount, commission_rate=None, trust_fee_rate=None):
    """
    Split a gross job amount into platform commission, trust fee and net payout.

    Rates are percentages and default to ``PLATFORM_COMMISSION`` and
    ``TRUST_SAFETY_FEE``. Every figure is rounded half-up to two places,
    but only after the net amount has been derived from the unrounded fees.

    Returns a dict with ``amount``, ``commission``, ``trustFee`` and ``netAmount``.
    """
    if commission_rate is None:
        commission_rate = settings.PLATFORM_COMMISSION
    if trust_fee_rate is None:
        trust_fee_rate = settings.TRUST_SAFETY_FEE

    amount = Decimal(str(amount))
    commission = amount * _rate(commission_rate)
    trust_fee = amount * _rate(trust_fee_rate)
    net_amount = amount - commission - trust_fee

    return {
        'amount': amount.quantize(CENTS, rounding=ROUND_HALF_UP),
        'commission': commission.quantize(CENTS, rounding=ROUND_HALF_UP),
        'trustFee': trust_fee.quantize(CENTS, rounding=ROUND_HALF_UP),
        'netAmount': net_amount.quantize(CENTS, rounding=ROUND_HALF_UP),
    }


def calculate_distance(lat1, lon1, lat2, lon2):
    """Great-circle distance in km between two coordinates (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2 +
        math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def paginate(page=1, limit=None):
    """
    Turn raw page/limit query values into ``(page, limit, offset)``.

    Bad input falls back to the defaults; limit is clamped to ``PAGINATION_MAX_LIMIT``.
    """
    if limit is None:
        limit = settings.PAGINATION_DEFAULT_LIMIT
    try:
        page = max(1, int(page))
    except (TypeError, ValueError):
        page = 1
    try:
        limit = min(settings.PAGINATION_MAX_LIMIT, max(1, int(limit)))
    except (TypeError, ValueError):
        limit = settings.PAGINATION_DEFAULT_LIMIT
    return page, limit, (page - 1) * limit
