"""
Grid builder - koltuk ve tesis listesinden yoğun 2 boyutlu kabin ızgarası üretir.

Izgaranın sınırları verinin kendisinden çıkarılır (x = sıra, y = sütun).
Deklare edilen deck konfigürasyonu sadece hiç öğe yokken kullanılır.
"""
import logging
from typing import List, Optional, Tuple, Union

from seatflow.models.seatmap_models import (
    CabinGrid,
    CellKind,
    Deck,
    Facility,
    GridCell,
    Seat,
)

logger = logging.getLogger("SeatFlow-Grid")

Placeable = Union[Seat, Facility]


def build_grid(deck: Deck) -> CabinGrid:
    """
    Deck'in koltuk ve tesislerini (row, column) ofsetlerine yerleştirir.

    Aynı koordinatı iki öğe paylaşırsa giriş sırasına göre sonraki kazanır.
    Hiç konumlu öğe yoksa tek hücrelik boş bir ızgara döner.
    """
    items: List[Tuple[int, int, Placeable]] = []

    for item in list(deck.seats) + list(deck.facilities):
        position = _position_of(item)
        if position is None:
            logger.warning(f"⚠️ {_describe(item)} has no coordinates, left out of the grid")
            continue
        items.append((position[0], position[1], item))

    if not items:
        origin = 0
        if deck.configuration and deck.configuration.start_seat_row is not None:
            origin = deck.configuration.start_seat_row
        return CabinGrid(
            start_row=origin,
            end_row=origin,
            min_column=0,
            max_column=0,
            cells=[[GridCell(row=origin, column=0)]],
        )

    start_row = min(x for x, _, _ in items)
    end_row = max(x for x, _, _ in items)
    min_column = min(y for _, y, _ in items)
    max_column = max(y for _, y, _ in items)

    cells = [
        [GridCell(row=row, column=column) for column in range(min_column, max_column + 1)]
        for row in range(start_row, end_row + 1)
    ]

    for x, y, item in items:
        r, c = x - start_row, y - min_column
        existing = cells[r][c]
        if existing.kind != CellKind.EMPTY:
            logger.warning(
                f"⚠️ Coordinate collision at ({x}, {y}): "
                f"{_describe(item)} replaces {_describe(existing.seat or existing.facility)}"
            )

        if isinstance(item, Seat):
            cells[r][c] = GridCell(kind=CellKind.SEAT, row=x, column=y, seat=item)
        else:
            cells[r][c] = GridCell(kind=CellKind.FACILITY, row=x, column=y, facility=item)

    return CabinGrid(
        start_row=start_row,
        end_row=end_row,
        min_column=min_column,
        max_column=max_column,
        cells=cells,
    )


def _position_of(item: Placeable) -> Optional[Tuple[int, int]]:
    coords = item.coordinates
    if coords is None or coords.x is None or coords.y is None:
        return None
    return coords.x, coords.y


def _describe(item: Optional[Placeable]) -> str:
    if isinstance(item, Seat):
        return f"seat {item.number}"
    if isinstance(item, Facility):
        return f"facility {item.code or '?'}"
    return "empty cell"
