"""
Seatmap engine - sunum katmanına açılan tek giriş noktası.

Grid / layout / sınıflandırma saf fonksiyonlardır ve seatmap verisi
değişmedikçe (replace_seatmaps) her (segment, deck) için bir kez hesaplanır.
Tek değişebilir state SelectionManager'dadır.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from seatflow.core.config import DEFAULT_CURRENCY, MAX_SELECTIONS
from seatflow.core.errors import (
    SeatNotAvailable,
    UnknownDeck,
    UnknownSeat,
    UnknownSegment,
    UnknownTraveler,
)
from seatflow.models.seatmap_models import (
    CabinView,
    CellKind,
    Deck,
    PriceTotal,
    Seat,
    Seatmap,
    SeatStatus,
    SegmentSummary,
    SelectionRecord,
    SeatTrait,
)
from seatflow.services.seatmap.cell_classifier import classify_cells
from seatflow.services.seatmap.grid_builder import build_grid
from seatflow.services.seatmap.layout_detector import LayoutStrategy, detect_deck_layout
from seatflow.services.seatmap.pricing import aggregate_total
from seatflow.services.seatmap.seat_status import (
    availability_status,
    pricing_entry_for,
    resolve_seat_status,
)
from seatflow.services.seatmap.selection_manager import SelectionManager

logger = logging.getLogger("SeatFlow-Engine")


class SeatmapEngine:

    def __init__(
        self,
        seatmaps: Sequence[Seatmap],
        traveler_ids: Iterable[str],
        max_selections: Optional[int] = MAX_SELECTIONS,
        layout_strategy: Optional[LayoutStrategy] = None,
        seat_characteristics: Optional[Dict[str, str]] = None,
        default_currency: str = DEFAULT_CURRENCY,
    ):
        self.selections = SelectionManager(traveler_ids, max_selections=max_selections)
        self.layout_strategy = layout_strategy
        self.seat_characteristics = dict(seat_characteristics or {})
        self.default_currency = default_currency

        self._seatmaps: List[Seatmap] = []
        self._seat_index: List[Dict[str, Tuple[int, Seat]]] = []
        self._views: Dict[Tuple[int, int], CabinView] = {}
        self._load(seatmaps)

        logger.info(
            f"🗺️ Seatmap engine ready | segments={len(self._seatmaps)} "
            f"travelers={len(self.selections.traveler_ids)} cap={self.selections.max_selections}"
        )

    @property
    def seatmaps(self) -> List[Seatmap]:
        return list(self._seatmaps)

    @property
    def traveler_ids(self) -> List[str]:
        return list(self.selections.traveler_ids)

    # --------------------------------------------------
    # CABIN VIEW
    # --------------------------------------------------
    def get_cabin_view(self, segment_index: int, deck_index: int = 0) -> CabinView:
        """
        Memoized per seatmap load; returns a deep copy of the cached view.
        """
        key = (segment_index, deck_index)
        if key not in self._views:
            seatmap = self._seatmap(segment_index)
            if not 0 <= deck_index < len(seatmap.decks):
                raise UnknownDeck(segment_index, deck_index)
            self._views[key] = self._build_view(seatmap, deck_index)
        return self._views[key].model_copy(deep=True)

    def get_seat_statuses(self, segment_index: int, deck_index: int = 0,
                          traveler_id: Optional[str] = None) -> Dict[str, SeatStatus]:
        """Status of every seat on one deck, keyed by seat number."""
        seatmap = self._seatmap(segment_index)
        if not 0 <= deck_index < len(seatmap.decks):
            raise UnknownDeck(segment_index, deck_index)

        selections = self.selections.get_selections(seatmap.segment_id)
        return {
            seat.number: resolve_seat_status(seat, selections, seatmap.segment_id, traveler_id)
            for seat in seatmap.decks[deck_index].seats
        }

    def get_seat_status(self, segment_index: int, seat_number: str,
                        traveler_id: Optional[str] = None) -> SeatStatus:
        seatmap = self._seatmap(segment_index)
        seat = self._seat(segment_index, seat_number)
        return resolve_seat_status(
            seat,
            self.selections.get_selections(seatmap.segment_id),
            seatmap.segment_id,
            traveler_id,
        )

    # --------------------------------------------------
    # SELECTION
    # --------------------------------------------------
    def select(self, segment_index: int, traveler_id: str, seat_number: str) -> SelectionRecord:
        """
        Seçimi doğrular, fiyatı yolcunun fiyat girişinden alır ve kaydeder.
        """
        seatmap = self._seatmap(segment_index)
        seat = self._seat(segment_index, seat_number)

        if traveler_id not in self.selections.traveler_ids:
            raise UnknownTraveler(traveler_id)

        current = self.selections.record_for(seatmap.segment_id, traveler_id)
        if current is not None and current.seat_number == seat.number:
            return current

        status = availability_status(seat, traveler_id)
        if status != SeatStatus.AVAILABLE:
            logger.warning(f"⚠️ Seat {seat.number} on {seatmap.segment_id} is {status.value}")
            raise SeatNotAvailable(seat.number, status.value)

        entry = pricing_entry_for(seat, traveler_id)
        return self.selections.select(
            seatmap.segment_id,
            traveler_id,
            seat.number,
            price=entry.price if entry else None,
            currency=entry.currency if entry else None,
        )

    def deselect(self, segment_index: int, traveler_id: str) -> Optional[SelectionRecord]:
        seatmap = self._seatmap(segment_index)
        return self.selections.deselect(seatmap.segment_id, traveler_id)

    def deselect_by_seat(self, segment_index: int, seat_number: str) -> Optional[SelectionRecord]:
        seatmap = self._seatmap(segment_index)
        return self.selections.deselect_by_seat(seatmap.segment_id, _normalize(seat_number))

    def get_selections(self, segment_index: Optional[int] = None) -> List[SelectionRecord]:
        if segment_index is None:
            return self.selections.get_selections()
        return self.selections.get_selections(self._seatmap(segment_index).segment_id)

    def get_total(self) -> PriceTotal:
        return aggregate_total(self.selections.get_selections(), self.default_currency)

    # --------------------------------------------------
    # SEGMENTS & METADATA
    # --------------------------------------------------
    def segment_summaries(self) -> List[SegmentSummary]:
        return [
            SegmentSummary(
                segment_index=index,
                segment_id=seatmap.segment_id,
                origin=seatmap.origin,
                destination=seatmap.destination,
                carrier_code=seatmap.carrier_code,
                flight_number=seatmap.flight_number,
                aircraft_code=seatmap.aircraft_code,
                deck_count=len(seatmap.decks),
                selected_count=self.selections.count_for_segment(seatmap.segment_id),
            )
            for index, seatmap in enumerate(self._seatmaps)
        ]

    def available_seat_count(self, segment_index: int, traveler_id: Optional[str] = None) -> int:
        """
        availableSeatsCounters değeri varsa onu, yoksa AVAILABLE koltuk sayısını döndürür.
        """
        seatmap = self._seatmap(segment_index)
        traveler_id = traveler_id or (self.selections.traveler_ids or [None])[0]

        if traveler_id in seatmap.available_seats_counters:
            return seatmap.available_seats_counters[traveler_id]

        return sum(
            1
            for deck in seatmap.decks
            for seat in deck.seats
            if availability_status(seat, traveler_id) == SeatStatus.AVAILABLE
        )

    def describe_characteristics(self, codes: Iterable[str]) -> List[str]:
        return [self.seat_characteristics.get(code, code) for code in codes]

    def replace_seatmaps(self, seatmaps: Sequence[Seatmap]) -> List[SelectionRecord]:
        """
        Re-fetch sonrası veriyi toptan değiştirir.

        Segmenti ya da koltuğu artık bulunmayan seçimler düşürülür ve döndürülür.
        """
        self._load(seatmaps)

        seats_by_segment = {
            seatmap.segment_id: set(self._seat_index[index])
            for index, seatmap in enumerate(self._seatmaps)
        }
        dropped = self.selections.prune(
            lambda record: record.seat_number in seats_by_segment.get(record.segment_id, set())
        )
        if dropped:
            logger.warning(f"⚠️ {len(dropped)} selection(s) dropped after seatmap refresh")
        return dropped

    # --------------------------------------------------
    # INTERNALS
    # --------------------------------------------------
    def _load(self, seatmaps: Sequence[Seatmap]) -> None:
        self._seatmaps = list(seatmaps)
        self._views = {}
        self._seat_index = []

        for seatmap in self._seatmaps:
            index: Dict[str, Tuple[int, Seat]] = {}
            for deck_index, deck in enumerate(seatmap.decks):
                for seat in deck.seats:
                    index[seat.number] = (deck_index, seat)
            self._seat_index.append(index)

    def _seatmap(self, segment_index: int) -> Seatmap:
        if not 0 <= segment_index < len(self._seatmaps):
            raise UnknownSegment(segment_index)
        return self._seatmaps[segment_index]

    def _seat(self, segment_index: int, seat_number: str) -> Seat:
        self._seatmap(segment_index)
        found = self._seat_index[segment_index].get(_normalize(seat_number))
        if found is None:
            raise UnknownSeat(seat_number)
        return found[1]

    def _build_view(self, seatmap: Seatmap, deck_index: int) -> CabinView:
        deck: Deck = seatmap.decks[deck_index]
        config = deck.configuration

        grid = build_grid(deck)
        layout = detect_deck_layout(deck, self.layout_strategy)

        wing_rows = None
        if config and config.start_wings_row is not None and config.end_wings_row is not None:
            wing_rows = range(config.start_wings_row, config.end_wings_row + 1)

        cells = classify_cells(
            grid,
            layout,
            exit_rows_x=config.exit_rows_x if config else None,
            wing_rows=wing_rows,
        )

        row_numbers: List[Optional[int]] = []
        exit_rows, over_wing = set(), set()
        for grid_row, classified_row in zip(grid.cells, cells):
            seats = [cell.seat for cell in grid_row if cell.kind == CellKind.SEAT and cell.seat]
            row_number = seats[0].row_number if seats else None
            row_numbers.append(row_number)
            if row_number is None:
                continue

            for cell in classified_row:
                if SeatTrait.EXIT in cell.traits:
                    exit_rows.add(row_number)
                if SeatTrait.OVER_WING in cell.traits:
                    over_wing.add(row_number)

        return CabinView(
            segment_id=seatmap.segment_id,
            deck_index=deck_index,
            deck_type=deck.deck_type,
            grid=grid,
            cabin_layout=layout,
            classified_cells=cells,
            row_numbers=row_numbers,
            exit_rows=sorted(exit_rows),
            wing_rows=sorted(over_wing),
        )


def _normalize(seat_number: str) -> str:
    return seat_number.strip().upper()
