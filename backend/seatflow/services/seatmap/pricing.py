"""
Seat pricing aggregator - seçili koltuk fiyatlarını toplar.

Tutarlar her zaman güncel kayıt kümesinden yeniden hesaplanır (cache yok).
Birden fazla para birimi varsa sessizce toplanmaz, MixedCurrency fırlatılır.
"""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, Optional

from seatflow.core.config import DEFAULT_CURRENCY
from seatflow.core.errors import MixedCurrency
from seatflow.models.seatmap_models import PriceTotal, SelectionRecord

logger = logging.getLogger("SeatFlow-Pricing")

ZERO = Decimal("0")


def totals_by_currency(records: Iterable[SelectionRecord]) -> Dict[str, Decimal]:
    """Sum per currency; records without a currency are left out."""
    totals: Dict[str, Decimal] = OrderedDict()
    for record in records:
        if not record.currency:
            continue
        totals[record.currency] = totals.get(record.currency, ZERO) + (record.price or ZERO)
    return dict(totals)


def aggregate_total(records: Iterable[SelectionRecord],
                    default_currency: str = DEFAULT_CURRENCY) -> PriceTotal:
    """
    Records without a currency are left out of both the currency check and
    the amount; a priced one among them is logged and skipped.
    """
    records = list(records)
    currencies = {record.currency for record in records if record.currency}

    if len(currencies) > 1:
        raise MixedCurrency(currencies)

    for record in records:
        if not record.currency and record.price:
            logger.warning(
                f"⚠️ Seat {record.seat_number} on {record.segment_id} priced without currency, "
                f"left out of the total"
            )

    currency = currencies.pop() if currencies else default_currency
    amount = sum((record.price or ZERO for record in records if record.currency), ZERO)

    return PriceTotal(amount=amount, currency=currency)


def segment_totals(records: Iterable[SelectionRecord],
                   default_currency: str = DEFAULT_CURRENCY) -> Dict[str, PriceTotal]:
    """Per-segment subtotal, in first-seen segment order."""
    grouped: Dict[str, list] = OrderedDict()
    for record in records:
        grouped.setdefault(record.segment_id, []).append(record)

    return {
        segment_id: aggregate_total(segment_records, default_currency)
        for segment_id, segment_records in grouped.items()
    }


def combine_with_offer(offer_total: Decimal, offer_currency: Optional[str],
                       records: Iterable[SelectionRecord]) -> PriceTotal:
    """Flight offer price plus selected seats, for the booking summary."""
    currency = offer_currency or DEFAULT_CURRENCY
    seats = aggregate_total(records, default_currency=currency)

    if seats.currency != currency:
        raise MixedCurrency({currency, seats.currency})

    return PriceTotal(amount=Decimal(str(offer_total)) + seats.amount, currency=currency)
