"""
Cabin layout detector - sütun harflerinden bölüm (section) düzenini çıkarır.

Varsayılan politika sezgiseldir (3-3, 2-4-2, 3-4-3 gibi gözlemlenen uçak
konvansiyonları). Otoriter konfigürasyon varsa ConfiguredLayoutStrategy
ile değiştirilebilir.
"""
import logging
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from seatflow.models.seatmap_models import CabinLayout, Deck

logger = logging.getLogger("SeatFlow-Layout")

NARROWBODY_MAX_COLUMNS = 6
MIDSIZE_MAX_COLUMNS = 8


class LayoutStrategy(Protocol):
    def classify_columns(self, labels: Sequence[str]) -> List[List[str]]:
        """Split sorted column labels into aisle-separated sections."""
        ...


class HeuristicLayoutStrategy:
    """
    Column-count thresholds:
        <= 6  -> two even halves (3-3, 2-2, 2-3 ...)
        7-8   -> 2 / middle / 2
        >= 9  -> 3 / middle / 3
    """

    def classify_columns(self, labels: Sequence[str]) -> List[List[str]]:
        labels = list(labels)
        count = len(labels)

        if count == 0:
            return []
        if count == 1:
            return [labels]

        if count <= NARROWBODY_MAX_COLUMNS:
            half = count // 2
            return [labels[:half], labels[half:]]

        outer = 2 if count <= MIDSIZE_MAX_COLUMNS else 3
        return [labels[:outer], labels[outer:-outer], labels[-outer:]]


class ConfiguredLayoutStrategy:
    """
    Authoritative section sizes, e.g. "3-4-3" or [["A", "C"], ["D", "E", "F"]].

    Falls back to the heuristic when the configuration does not cover the
    observed labels.
    """

    def __init__(self, configuration: Union[str, Sequence[Sequence[str]]],
                 fallback: Optional[LayoutStrategy] = None):
        self.configuration = configuration
        self.fallback = fallback or HeuristicLayoutStrategy()

    def classify_columns(self, labels: Sequence[str]) -> List[List[str]]:
        labels = list(labels)

        if isinstance(self.configuration, str):
            sizes = _parse_pattern(self.configuration)
            if sizes and sum(sizes) == len(labels):
                sections, start = [], 0
                for size in sizes:
                    sections.append(labels[start:start + size])
                    start += size
                return sections
        else:
            sections = [[str(label) for label in section] for section in self.configuration]
            flat = [label for section in sections for label in section]
            if sorted(flat) == labels:
                return sections

        logger.warning(
            f"⚠️ Configured layout {self.configuration!r} does not match columns "
            f"{''.join(labels)}, using heuristic"
        )
        return self.fallback.classify_columns(labels)


def detect_cabin_layout(labels: Iterable[str],
                        strategy: Optional[LayoutStrategy] = None) -> CabinLayout:
    """Deterministic: the same label set always yields the same layout."""
    columns = sorted({label for label in labels if label})
    sections = (strategy or HeuristicLayoutStrategy()).classify_columns(columns)
    sections = [section for section in sections if section]

    return CabinLayout(
        columns=columns,
        sections=sections,
        widebody=len(sections) > 2,
    )


def detect_deck_layout(deck: Deck, strategy: Optional[LayoutStrategy] = None) -> CabinLayout:
    return detect_cabin_layout((seat.column_label for seat in deck.seats), strategy)


def _parse_pattern(pattern: str) -> List[int]:
    try:
        sizes = [int(part) for part in pattern.replace(" ", "").split("-")]
    except ValueError:
        return []
    return sizes if all(size > 0 for size in sizes) else []
