"""
Selection manager - motorun tek değişebilir bileşeni.

Tüm itinerary için (segment, traveler, seat) atamalarını tutar.
Kayıtlar iki indeks arkasında saklanır:
    (segment, traveler) -> SelectionRecord
    (segment, seat)     -> traveler
Geçersiz her çağrı reddedilir ve state değişmeden kalır.

Thread-safe değildir; çok thread'li host kendi kilidini eklemelidir.
"""
import logging
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from seatflow.core.errors import CapacityExceeded, SeatAlreadySelected, UnknownTraveler
from seatflow.models.seatmap_models import SelectionRecord

logger = logging.getLogger("SeatFlow-Selection")


class SelectionManager:

    def __init__(self, traveler_ids: Iterable[str], max_selections: Optional[int] = None):
        self.traveler_ids: List[str] = list(dict.fromkeys(str(t) for t in traveler_ids))

        limit = len(self.traveler_ids)
        if max_selections is not None:
            limit = min(max(max_selections, 0), limit)
        self.max_selections = limit

        self._by_traveler: Dict[Tuple[str, str], SelectionRecord] = {}
        self._by_seat: Dict[Tuple[str, str], str] = {}

    # --------------------------------------------------
    # MUTATIONS
    # --------------------------------------------------
    def select(self, segment_id: str, traveler_id: str, seat_number: str,
               price: Optional[Decimal] = None, currency: Optional[str] = None) -> SelectionRecord:
        """
        Assign a seat; a traveler reselecting on the same segment replaces
        their previous seat.
        """
        if traveler_id not in self.traveler_ids:
            raise UnknownTraveler(traveler_id)

        holder = self._by_seat.get((segment_id, seat_number))
        if holder is not None and holder != traveler_id:
            logger.warning(f"⚠️ Seat {seat_number} on {segment_id} already held by {holder}")
            raise SeatAlreadySelected(segment_id, seat_number, holder)

        replacing = (segment_id, traveler_id) in self._by_traveler
        if not replacing and self.count_for_segment(segment_id) >= self.max_selections:
            logger.warning(
                f"⚠️ Capacity reached on {segment_id} ({self.max_selections}), "
                f"rejecting {seat_number} for traveler {traveler_id}"
            )
            raise CapacityExceeded(segment_id, self.max_selections)

        previous = self._remove(segment_id, traveler_id)

        record = SelectionRecord(
            segment_id=segment_id,
            traveler_id=traveler_id,
            seat_number=seat_number,
            price=price,
            currency=currency,
        )
        self._by_traveler[(segment_id, traveler_id)] = record
        self._by_seat[(segment_id, seat_number)] = traveler_id

        if previous is not None and previous.seat_number != seat_number:
            logger.info(f"💺 {segment_id} | traveler {traveler_id}: {previous.seat_number} → {seat_number}")
        else:
            logger.info(f"💺 {segment_id} | traveler {traveler_id} selected {seat_number}")

        return record

    def deselect(self, segment_id: str, traveler_id: str) -> Optional[SelectionRecord]:
        """Remove the traveler's seat on a segment; no-op when there is none."""
        record = self._remove(segment_id, traveler_id)
        if record is not None:
            logger.info(f"🗑️ {segment_id} | traveler {traveler_id} released {record.seat_number}")
        return record

    def deselect_by_seat(self, segment_id: str, seat_number: str) -> Optional[SelectionRecord]:
        traveler_id = self._by_seat.get((segment_id, seat_number))
        if traveler_id is None:
            return None
        return self.deselect(segment_id, traveler_id)

    def clear(self, segment_id: Optional[str] = None) -> None:
        if segment_id is None:
            self._by_traveler.clear()
            self._by_seat.clear()
            return
        self.prune(lambda record: record.segment_id != segment_id)

    def prune(self, keep: Callable[[SelectionRecord], bool]) -> List[SelectionRecord]:
        """Drop every record for which keep() is false; returns the dropped ones."""
        dropped = [record for record in self._by_traveler.values() if not keep(record)]
        for record in dropped:
            self._remove(record.segment_id, record.traveler_id)
        return dropped

    # --------------------------------------------------
    # QUERIES
    # --------------------------------------------------
    def get_selections(self, segment_id: Optional[str] = None) -> List[SelectionRecord]:
        records = list(self._by_traveler.values())
        if segment_id is None:
            return records
        return [record for record in records if record.segment_id == segment_id]

    def record_for(self, segment_id: str, traveler_id: str) -> Optional[SelectionRecord]:
        return self._by_traveler.get((segment_id, traveler_id))

    def holder_of(self, segment_id: str, seat_number: str) -> Optional[str]:
        return self._by_seat.get((segment_id, seat_number))

    def count_for_segment(self, segment_id: str) -> int:
        return sum(1 for seg, _ in self._by_traveler if seg == segment_id)

    def __len__(self) -> int:
        return len(self._by_traveler)

    def _remove(self, segment_id: str, traveler_id: str) -> Optional[SelectionRecord]:
        record = self._by_traveler.pop((segment_id, traveler_id), None)
        if record is not None:
            self._by_seat.pop((segment_id, record.seat_number), None)
        return record
