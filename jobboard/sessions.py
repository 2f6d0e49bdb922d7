import uuid
import logging
import time
import threading
from typing import Optional
from pydantic import BaseModel
from fastapi import HTTPException
from jobboard.ee import EventEmitter
from jobboard.models import JobFilter

logger = logging.getLogger(__name__)

SESSION_TTL = 3600  # 1 hour
CLEANUP_INTERVAL = 300  # every 5 minutes


class Session(BaseModel):
    filter: JobFilter
    bus: EventEmitter
    csrfToken: str
    last_seen: int = 0
    model_config = {
        "arbitrary_types_allowed": True
    }


sessions: dict[str, Session] = {}

def createSession() -> str:
    session_id = str(uuid.uuid4())
    sessions[session_id] = Session(
      filter=JobFilter(),
      bus=EventEmitter(),
      csrfToken=uuid.uuid4().hex,
      last_seen=int(time.time())
    )
    logger.debug("Created session %s", session_id)
    return session_id

def getSession(*, session_id: Optional[str]) -> Session:
    if not session_id or session_id not in sessions:
        raise HTTPException(status_code=400, detail="Invalid Session")
    return sessions[session_id]

def updateFilter(*, session_id: str, filter: JobFilter):
    session = getSession(session_id=session_id)
    touch_session(session_id=session_id)
    session.filter = filter
    session.bus.emit("update")

def touch_session(*, session_id: str):
    session = getSession(session_id=session_id)
    session.last_seen = int(time.time())

def broadcast(event: str, *args):
    """Emit ``event`` on every live session's bus."""
    for session in list(sessions.values()):
        session.bus.emit(event, *args)

def expire_sessions(*, now: float, ttl: int = SESSION_TTL) -> list[str]:
    expired = [
        sid for sid, session in list(sessions.items())
        if now - session.last_seen > ttl
    ]
    for sid in expired:
        logger.info("Removing inactive session: %s", sid)
        sessions.pop(sid, None)
    return expired

def cleanup_sessions_loop(stop: threading.Event, ttl: int = SESSION_TTL, interval: int = CLEANUP_INTERVAL):
    while not stop.is_set():
        expire_sessions(now=time.time(), ttl=ttl)
        stop.wait(interval)

def start_cleanup_thread(*, ttl: int = SESSION_TTL, interval: int = CLEANUP_INTERVAL) -> threading.Event:
    stop = threading.Event()
    thread = threading.Thread(
        target=cleanup_sessions_loop,
        args=(stop, ttl, interval),
        daemon=True,
    )
    thread.start()
    logger.info("Session cleanup thread started")
    return stop
