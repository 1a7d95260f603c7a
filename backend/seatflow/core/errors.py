"""
SeatFlow - Engine exceptions

Input-quality problems never raise (they are logged and degraded).
Everything here is an invariant violation or an unknown reference and
leaves engine state unchanged.
"""


class SeatmapError(Exception):
    """Base class for all seatmap engine errors."""

    code = "SEATMAP_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CapacityExceeded(SeatmapError):
    code = "CAPACITY_EXCEEDED"

    def __init__(self, segment_id: str, limit: int):
        super().__init__(f"Maximum of {limit} seat(s) already selected on segment {segment_id}")
        self.segment_id = segment_id
        self.limit = limit


class MixedCurrency(SeatmapError):
    code = "MIXED_CURRENCY"

    def __init__(self, currencies):
        self.currencies = sorted(currencies)
        super().__init__(f"Selections are priced in more than one currency: {', '.join(self.currencies)}")


class SeatAlreadySelected(SeatmapError):
    code = "SEAT_ALREADY_SELECTED"

    def __init__(self, segment_id: str, seat_number: str, holder: str):
        super().__init__(f"Seat {seat_number} on segment {segment_id} is already held by traveler {holder}")
        self.segment_id = segment_id
        self.seat_number = seat_number
        self.holder = holder


class SeatNotAvailable(SeatmapError):
    code = "SEAT_NOT_AVAILABLE"

    def __init__(self, seat_number: str, status: str):
        super().__init__(f"Seat {seat_number} cannot be selected (status: {status})")
        self.seat_number = seat_number
        self.status = status


class UnknownTraveler(SeatmapError):
    code = "UNKNOWN_TRAVELER"

    def __init__(self, traveler_id: str):
        super().__init__(f"Traveler {traveler_id} is not part of this booking")
        self.traveler_id = traveler_id


class UnknownSegment(SeatmapError):
    code = "UNKNOWN_SEGMENT"

    def __init__(self, segment_index: int):
        super().__init__(f"No seatmap for segment index {segment_index}")
        self.segment_index = segment_index


class UnknownDeck(SeatmapError):
    code = "UNKNOWN_DECK"

    def __init__(self, segment_index: int, deck_index: int):
        super().__init__(f"Segment {segment_index} has no deck {deck_index}")
        self.segment_index = segment_index
        self.deck_index = deck_index


class UnknownSeat(SeatmapError):
    code = "UNKNOWN_SEAT"

    def __init__(self, seat_number: str):
        super().__init__(f"Seat {seat_number} does not exist on this seatmap")
        self.seat_number = seat_number
