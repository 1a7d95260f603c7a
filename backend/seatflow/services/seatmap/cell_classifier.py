"""
Cell classifier - her ızgara hücresini seat / aisle / empty / facility olarak etiketler
ve koltuklara karakteristik kodlardan + konumdan türetilen özellikler ekler.

Saf ve total: her hücre tam olarak bir sınıf alır.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from seatflow.core.config import AISLE_OCCUPANCY_THRESHOLD
from seatflow.models.seatmap_models import (
    CabinGrid,
    CabinLayout,
    CellClass,
    CellKind,
    ClassifiedCell,
    GridCell,
    Seat,
    SeatTrait,
)

# Amadeus seat characteristic codes
EXIT_CODE = "E"
LEGROOM_CODE = "L"
BULKHEAD_CODE = "K"
WINDOW_CODE = "W"
AISLE_CODE = "A"
BASSINET_CODE = "B"
CHARGEABLE_CODE = "CH"
PREFERRED_CODES = {"O", "1A_AQC_PREMIUM_SEAT"}


def classify_cells(
    grid: CabinGrid,
    layout: CabinLayout,
    exit_rows_x: Optional[Iterable[int]] = None,
    wing_rows: Optional[range] = None,
    occupancy_threshold: float = AISLE_OCCUPANCY_THRESHOLD,
) -> List[List[ClassifiedCell]]:
    """Classify every cell of the grid; returns rows x columns."""
    aisle_columns = infer_aisle_columns(grid, layout, occupancy_threshold)
    declared_exits = set(exit_rows_x or [])

    classified: List[List[ClassifiedCell]] = []
    for grid_row in grid.cells:
        classified.append([
            _classify_cell(cell, layout, aisle_columns, declared_exits, wing_rows)
            for cell in grid_row
        ])
    return classified


def infer_aisle_columns(grid: CabinGrid, layout: CabinLayout,
                        occupancy_threshold: float = AISLE_OCCUPANCY_THRESHOLD) -> Set[int]:
    """
    Physical column indices drawn as aisles.

    Columns strictly between two sections are aisles; on top of that any
    column with seat occupancy below the threshold is an aisle.
    """
    columns_by_label: Dict[str, Set[int]] = defaultdict(set)
    seats_per_column: Dict[int, int] = defaultdict(int)

    for grid_row in grid.cells:
        for cell in grid_row:
            if cell.kind == CellKind.SEAT and cell.seat is not None:
                columns_by_label[cell.seat.column_label].add(cell.column)
                seats_per_column[cell.column] += 1

    aisles: Set[int] = set()

    for left, right in zip(layout.sections, layout.sections[1:]):
        left_columns = set().union(*(columns_by_label.get(label, set()) for label in left))
        right_columns = set().union(*(columns_by_label.get(label, set()) for label in right))
        if not left_columns or not right_columns:
            continue
        aisles.update(range(max(left_columns) + 1, min(right_columns)))

    # Hiç koltuk yoksa (boş deck) doluluk kuralı uygulanmaz
    if seats_per_column:
        for column in range(grid.min_column, grid.max_column + 1):
            if seats_per_column.get(column, 0) / grid.row_count < occupancy_threshold:
                aisles.add(column)

    return aisles


def seat_traits(seat: Seat, layout: CabinLayout,
                exit_rows_x: Optional[Iterable[int]] = None,
                wing_rows: Optional[range] = None) -> List[SeatTrait]:
    """
    Sub-classification of a seat, in SeatTrait declaration order.

    exit_rows_x are grid x coordinates (exitRowsX); wing_rows are printed
    row numbers (startWingsRow..endWingsRow).
    """
    codes = set(seat.characteristics_codes)
    row_number = seat.row_number
    label = seat.column_label
    traits: Set[SeatTrait] = set()

    x = seat.coordinates.x if seat.coordinates else None

    if EXIT_CODE in codes or (x is not None and x in set(exit_rows_x or [])):
        traits.add(SeatTrait.EXIT)
    if LEGROOM_CODE in codes:
        traits.add(SeatTrait.EXTRA_LEGROOM)
    if BULKHEAD_CODE in codes:
        traits.add(SeatTrait.BULKHEAD)
    if codes & PREFERRED_CODES:
        traits.add(SeatTrait.PREFERRED)
    if BASSINET_CODE in codes:
        traits.add(SeatTrait.BASSINET)
    if CHARGEABLE_CODE in codes:
        traits.add(SeatTrait.CHARGEABLE)

    # W / A kodu yoksa konumdan çıkarılır, ikisi birbirinden bağımsız
    if WINDOW_CODE in codes or label in layout.window_columns:
        traits.add(SeatTrait.WINDOW)
    if AISLE_CODE in codes or label in layout.aisle_columns:
        traits.add(SeatTrait.AISLE)

    if wing_rows is not None and row_number is not None and row_number in wing_rows:
        traits.add(SeatTrait.OVER_WING)

    return [trait for trait in SeatTrait if trait in traits]


def _classify_cell(cell: GridCell, layout: CabinLayout, aisle_columns: Set[int],
                   exit_rows_x: Set[int], wing_rows: Optional[range]) -> ClassifiedCell:
    if cell.kind == CellKind.SEAT and cell.seat is not None:
        return ClassifiedCell(
            cell_class=CellClass.SEAT,
            row=cell.row,
            column=cell.column,
            seat_number=cell.seat.number,
            traits=seat_traits(cell.seat, layout, exit_rows_x, wing_rows),
        )

    if cell.kind == CellKind.FACILITY:
        return ClassifiedCell(
            cell_class=CellClass.FACILITY,
            row=cell.row,
            column=cell.column,
            facility_code=cell.facility.code if cell.facility else None,
        )

    return ClassifiedCell(
        cell_class=CellClass.AISLE if cell.column in aisle_columns else CellClass.EMPTY,
        row=cell.row,
        column=cell.column,
    )
