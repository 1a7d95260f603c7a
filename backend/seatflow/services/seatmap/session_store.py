import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from seatflow.core.config import SESSION_TTL_MINUTES
from seatflow.services.seatmap.engine import SeatmapEngine

# In-memory seat selection sessions (one engine per booking draft)
_sessions: Dict[str, Dict[str, Any]] = {}


def create_session(engine: SeatmapEngine, session_id: Optional[str] = None) -> str:
    """
    Engine'i SESSION_TTL_MINUTES dakika geçerli olacak şekilde saklar.
    """
    session_id = session_id or uuid.uuid4().hex

    _sessions[session_id] = {
        "engine": engine,
        "expires_at": datetime.now(timezone.utc) + timedelta(minutes=SESSION_TTL_MINUTES)
    }
    return session_id


def get_session(session_id: str) -> Optional[SeatmapEngine]:
    """
    Geçerli bir session varsa engine'i döndürür ve süresini uzatır, yoksa None.
    """
    entry = _sessions.get(session_id)
    if not entry:
        return None

    now = datetime.now(timezone.utc)
    if now > entry["expires_at"]:
        del _sessions[session_id]
        return None

    engine = entry.get("engine")
    if not isinstance(engine, SeatmapEngine):
        return None

    entry["expires_at"] = now + timedelta(minutes=SESSION_TTL_MINUTES)
    return engine


def drop_session(session_id: str) -> bool:
    return _sessions.pop(session_id, None) is not None


def clear_sessions() -> None:
    """Session'ları temizler (test için)."""
    _sessions.clear()


def get_session_count() -> int:
    """Aktif session sayısını döndürür."""
    return len(_sessions)
