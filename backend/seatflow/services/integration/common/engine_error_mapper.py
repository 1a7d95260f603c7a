from seatflow.core.errors import (
    SeatmapError,
    CapacityExceeded,
    MixedCurrency,
    SeatAlreadySelected,
    SeatNotAvailable,
    UnknownTraveler,
    UnknownSegment,
    UnknownDeck,
    UnknownSeat,
)
from seatflow.services.integration.common.errors import AppError


def map_engine_error(error: SeatmapError) -> tuple[int, AppError]:
    if isinstance(error, CapacityExceeded):
        return 409, AppError(
            code=error.code,
            message="Maximum seats reached. Deselect a seat before choosing another.",
            details={"segment_id": error.segment_id, "limit": error.limit}
        )

    if isinstance(error, MixedCurrency):
        return 409, AppError(
            code=error.code,
            message=error.message,
            details={"currencies": error.currencies}
        )

    if isinstance(error, SeatAlreadySelected):
        return 409, AppError(
            code=error.code,
            message="Selected seat is no longer available. Please choose another seat.",
            details={"seat_number": error.seat_number, "holder": error.holder}
        )

    if isinstance(error, SeatNotAvailable):
        return 409, AppError(
            code=error.code,
            message="Selected seat is no longer available. Please choose another seat.",
            details={"seat_number": error.seat_number, "status": error.status}
        )

    if isinstance(error, (UnknownSegment, UnknownDeck, UnknownSeat)):
        return 404, AppError(code=error.code, message=error.message)

    if isinstance(error, UnknownTraveler):
        return 400, AppError(
            code=error.code,
            message=error.message,
            details={"traveler_id": error.traveler_id}
        )

    return 400, AppError(
        code=getattr(error, "code", "SEATMAP_ERROR"),
        message=str(error)
    )
