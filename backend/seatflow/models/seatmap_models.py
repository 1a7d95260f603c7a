# backend/seatflow/models/seatmap_models.py
import re
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SeatAvailability(str, Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    BLOCKED = "BLOCKED"


class SeatStatus(str, Enum):
    """Render-ready status of a single seat."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    BLOCKED = "blocked"
    SELECTED = "selected"


class CellKind(str, Enum):
    """What the raw grid holds at a coordinate."""
    SEAT = "seat"
    FACILITY = "facility"
    EMPTY = "empty"


class CellClass(str, Enum):
    """Primary classification after aisle inference."""
    SEAT = "seat"
    AISLE = "aisle"
    EMPTY = "empty"
    FACILITY = "facility"


class SeatTrait(str, Enum):
    EXIT = "exit"
    EXTRA_LEGROOM = "extra_legroom"
    BULKHEAD = "bulkhead"
    PREFERRED = "preferred"
    WINDOW = "window"
    AISLE = "aisle"
    BASSINET = "bassinet"
    CHARGEABLE = "chargeable"
    OVER_WING = "over_wing"


# --------------------------------------------------
# RAW INVENTORY (immutable once fetched)
# --------------------------------------------------

class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: Optional[int] = None     # row (length) position
    y: Optional[int] = None     # column (width) position


class TravelerPricingEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    traveler_id: Optional[str] = None
    availability: Optional[str] = None     # AVAILABLE / OCCUPIED / BLOCKED
    price: Optional[Decimal] = None
    currency: Optional[str] = None


class Seat(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: str                            # "14C"
    cabin: Optional[str] = None
    characteristics_codes: List[str] = Field(default_factory=list)
    coordinates: Optional[Coordinates] = None
    traveler_pricing: List[TravelerPricingEntry] = Field(default_factory=list)
    amenities: List[dict] = Field(default_factory=list)

    @property
    def column_label(self) -> str:
        return re.sub(r"\d", "", self.number)

    @property
    def row_number(self) -> Optional[int]:
        digits = re.sub(r"\D", "", self.number)
        return int(digits) if digits else None


class Facility(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: Optional[str] = None             # LA / GA / ST / CL ...
    column: Optional[str] = None
    row: Optional[str] = None
    position: Optional[str] = None         # FRONT / REAR / SEAT
    coordinates: Optional[Coordinates] = None


class DeckConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: Optional[int] = None
    length: Optional[int] = None
    start_seat_row: Optional[int] = None
    end_seat_row: Optional[int] = None
    start_wings_row: Optional[int] = None
    end_wings_row: Optional[int] = None
    start_wings_x: Optional[int] = None
    end_wings_x: Optional[int] = None
    exit_rows_x: List[int] = Field(default_factory=list)    # exitRowsX, grid x coordinates


class Deck(BaseModel):
    model_config = ConfigDict(frozen=True)

    deck_type: str = "MAIN"
    configuration: Optional[DeckConfiguration] = None
    seats: List[Seat] = Field(default_factory=list)
    facilities: List[Facility] = Field(default_factory=list)


class Seatmap(BaseModel):
    model_config = ConfigDict(frozen=True)

    segment_id: str
    carrier_code: Optional[str] = None
    flight_number: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    departure_at: Optional[str] = None
    aircraft_code: Optional[str] = None
    cabin_class: Optional[str] = None
    decks: List[Deck] = Field(default_factory=list)
    available_seats_counters: Dict[str, int] = Field(default_factory=dict)


# --------------------------------------------------
# SELECTION STATE
# --------------------------------------------------

class SelectionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    segment_id: str
    traveler_id: str
    seat_number: str
    price: Optional[Decimal] = None
    currency: Optional[str] = None


class PriceTotal(BaseModel):
    amount: Decimal
    currency: str


# --------------------------------------------------
# DERIVED VIEWS
# --------------------------------------------------

class CabinLayout(BaseModel):
    model_config = ConfigDict(frozen=True)

    columns: List[str] = Field(default_factory=list)
    sections: List[List[str]] = Field(default_factory=list)
    widebody: bool = False

    @property
    def aisle_boundaries(self) -> List[tuple]:
        """(left label, right label) for every aisle between two sections."""
        return [
            (left[-1], right[0])
            for left, right in zip(self.sections, self.sections[1:])
            if left and right
        ]

    @property
    def window_columns(self) -> List[str]:
        if not self.columns:
            return []
        return sorted({self.columns[0], self.columns[-1]})

    @property
    def aisle_columns(self) -> List[str]:
        labels = set()
        for left, right in self.aisle_boundaries:
            labels.add(left)
            labels.add(right)
        return sorted(labels)


class GridCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CellKind = CellKind.EMPTY
    row: int
    column: int
    seat: Optional[Seat] = None
    facility: Optional[Facility] = None


class CabinGrid(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_row: int
    end_row: int
    min_column: int
    max_column: int
    cells: List[List[GridCell]]

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def column_count(self) -> int:
        return self.max_column - self.min_column + 1

    def cell_at(self, row: int, column: int) -> Optional[GridCell]:
        """Cell at a physical coordinate, None when outside the grid."""
        r, c = row - self.start_row, column - self.min_column
        if 0 <= r < self.row_count and 0 <= c < self.column_count:
            return self.cells[r][c]
        return None


class ClassifiedCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    cell_class: CellClass
    row: int
    column: int
    seat_number: Optional[str] = None
    facility_code: Optional[str] = None
    traits: List[SeatTrait] = Field(default_factory=list)


class CabinView(BaseModel):
    model_config = ConfigDict(frozen=True)

    segment_id: str
    deck_index: int
    deck_type: str
    grid: CabinGrid
    cabin_layout: CabinLayout
    classified_cells: List[List[ClassifiedCell]]
    row_numbers: List[Optional[int]] = Field(default_factory=list)
    exit_rows: List[int] = Field(default_factory=list)
    wing_rows: List[int] = Field(default_factory=list)


class SegmentSummary(BaseModel):
    segment_index: int
    segment_id: str
    origin: Optional[str] = None
    destination: Optional[str] = None
    carrier_code: Optional[str] = None
    flight_number: Optional[str] = None
    aircraft_code: Optional[str] = None
    deck_count: int = 0
    selected_count: int = 0


# --------------------------------------------------
# API PAYLOADS
# --------------------------------------------------

class SessionCreateRequest(BaseModel):
    seatmaps: Any                          # raw SeatMap Display response or its data list
    traveler_ids: List[str]
    max_selections: Optional[int] = None
    layout: Optional[str] = None           # authoritative pattern, e.g. "3-4-3"


class SeatSelectionRequest(BaseModel):
    segment_index: int
    traveler_id: str
    seat_number: str
