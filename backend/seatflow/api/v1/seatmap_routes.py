"""
SeatFlow API - Seatmap Routes
Koltuk haritası görüntüleme ve koltuk seçimi

Endpoints:
    POST   /seatmaps/sessions                                   - Seatmap yükle, session aç
    GET    /seatmaps/sessions/{sid}/segments                    - Segment özetleri
    GET    /seatmaps/sessions/{sid}/segments/{seg}/decks/{deck} - Kabin görünümü
    GET    /seatmaps/sessions/{sid}/segments/{seg}/seats/{seat} - Koltuk durumu
    POST   /seatmaps/sessions/{sid}/selections                  - Koltuk seç
    GET    /seatmaps/sessions/{sid}/selections                  - Seçimler
    DELETE /seatmaps/sessions/{sid}/segments/{seg}/travelers/{tid} - Yolcunun seçimini kaldır
    DELETE /seatmaps/sessions/{sid}/segments/{seg}/seats/{seat}    - Koltuktaki seçimi kaldır
    GET    /seatmaps/sessions/{sid}/total                       - Toplam koltuk ücreti
    DELETE /seatmaps/sessions/{sid}                             - Session kapat

Handler'lar async'tir ve engine çağrıları içinde await yoktur; aynı event
loop üzerindeki çağrılar böylece sıralı çalışır.
"""

from typing import Optional
import logging

from fastapi import APIRouter, HTTPException, Query
from fastapi.encoders import jsonable_encoder

from seatflow.core.errors import SeatmapError
from seatflow.core.metrics import track_selection, set_active_sessions
from seatflow.models.seatmap_models import SessionCreateRequest, SeatSelectionRequest
from seatflow.services.integration.common.engine_error_mapper import map_engine_error
from seatflow.services.seatmap.engine import SeatmapEngine
from seatflow.services.seatmap.layout_detector import ConfiguredLayoutStrategy
from seatflow.services.seatmap.mapper import map_amadeus_seatmaps, extract_seat_characteristics
from seatflow.services.seatmap.session_store import (
    create_session,
    get_session,
    drop_session,
    get_session_count,
)

router = APIRouter(prefix="/seatmaps", tags=["Seatmaps"])
logger = logging.getLogger("SeatFlow-Seatmaps")


def _engine_or_410(session_id: str) -> SeatmapEngine:
    engine = get_session(session_id)
    if engine is None:
        raise HTTPException(410, "Seat selection session expired. Please reload the seatmap.")
    return engine


def _raise_engine_error(error: SeatmapError):
    status, payload = map_engine_error(error)
    raise HTTPException(status_code=status, detail=payload.model_dump())


# --------------------------------------------------
# SESSION
# --------------------------------------------------
@router.post("/sessions")
async def create_seatmap_session(request: SessionCreateRequest):
    """
    Ham Amadeus seatmap yanıtından engine oluştur
    """
    seatmaps = map_amadeus_seatmaps(request.seatmaps)
    if not seatmaps:
        raise HTTPException(422, "No usable seatmap in payload")

    if not request.traveler_ids:
        raise HTTPException(422, "At least one traveler is required")

    engine = SeatmapEngine(
        seatmaps,
        request.traveler_ids,
        max_selections=request.max_selections,
        layout_strategy=ConfiguredLayoutStrategy(request.layout) if request.layout else None,
        seat_characteristics=extract_seat_characteristics(request.seatmaps),
    )
    session_id = create_session(engine)
    set_active_sessions(get_session_count())

    logger.info(f"🗺️ Seatmap session {session_id} | segments={len(seatmaps)}")

    return jsonable_encoder({
        "session_id": session_id,
        "segments": engine.segment_summaries(),
    })


@router.delete("/sessions/{session_id}")
async def close_seatmap_session(session_id: str):
    dropped = drop_session(session_id)
    set_active_sessions(get_session_count())
    return {"success": dropped}


# --------------------------------------------------
# CABIN VIEW
# --------------------------------------------------
@router.get("/sessions/{session_id}/segments")
async def list_segments(session_id: str):
    engine = _engine_or_410(session_id)
    return jsonable_encoder(engine.segment_summaries())


@router.get("/sessions/{session_id}/segments/{segment_index}/decks/{deck_index}")
async def cabin_view(
    session_id: str,
    segment_index: int,
    deck_index: int,
    traveler_id: Optional[str] = Query(default=None, description="Fiyat/müsaitlik bu yolcuya göre")
):
    """
    Kabin ızgarası + layout + hücre sınıfları + koltuk durumları
    """
    engine = _engine_or_410(session_id)
    try:
        view = engine.get_cabin_view(segment_index, deck_index)
        statuses = engine.get_seat_statuses(segment_index, deck_index, traveler_id)
    except SeatmapError as e:
        _raise_engine_error(e)

    return jsonable_encoder({
        "view": view,
        "statuses": statuses,
        "available": engine.available_seat_count(segment_index, traveler_id),
    })


@router.get("/sessions/{session_id}/segments/{segment_index}/seats/{seat_number}")
async def seat_status(
    session_id: str,
    segment_index: int,
    seat_number: str,
    traveler_id: Optional[str] = Query(default=None)
):
    engine = _engine_or_410(session_id)
    try:
        status = engine.get_seat_status(segment_index, seat_number, traveler_id)
    except SeatmapError as e:
        _raise_engine_error(e)

    return {"seat_number": seat_number.upper(), "status": status.value}


# --------------------------------------------------
# SELECTION
# --------------------------------------------------
@router.post("/sessions/{session_id}/selections")
async def select_seat(session_id: str, request: SeatSelectionRequest):
    engine = _engine_or_410(session_id)
    try:
        with track_selection("select"):
            record = engine.select(request.segment_index, request.traveler_id, request.seat_number)
    except SeatmapError as e:
        _raise_engine_error(e)

    return jsonable_encoder(record)


@router.get("/sessions/{session_id}/selections")
async def list_selections(
    session_id: str,
    segment_index: Optional[int] = Query(default=None, ge=0)
):
    engine = _engine_or_410(session_id)
    try:
        records = engine.get_selections(segment_index)
    except SeatmapError as e:
        _raise_engine_error(e)

    return jsonable_encoder(records)


@router.delete("/sessions/{session_id}/segments/{segment_index}/travelers/{traveler_id}")
async def deselect_traveler(session_id: str, segment_index: int, traveler_id: str):
    engine = _engine_or_410(session_id)
    try:
        with track_selection("deselect"):
            removed = engine.deselect(segment_index, traveler_id)
    except SeatmapError as e:
        _raise_engine_error(e)

    return jsonable_encoder({"removed": removed})


@router.delete("/sessions/{session_id}/segments/{segment_index}/seats/{seat_number}")
async def deselect_seat(session_id: str, segment_index: int, seat_number: str):
    engine = _engine_or_410(session_id)
    try:
        with track_selection("deselect"):
            removed = engine.deselect_by_seat(segment_index, seat_number)
    except SeatmapError as e:
        _raise_engine_error(e)

    return jsonable_encoder({"removed": removed})


# --------------------------------------------------
# PRICING
# --------------------------------------------------
@router.get("/sessions/{session_id}/total")
async def selection_total(session_id: str):
    engine = _engine_or_410(session_id)
    try:
        total = engine.get_total()
    except SeatmapError as e:
        _raise_engine_error(e)

    return jsonable_encoder(total)
