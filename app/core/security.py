"""Provides session-token security for FastAPI endpoints."""

import logging
import secrets

from fastapi import Depends
from fastapi import HTTPException
from fastapi.security import APIKeyHeader

from app.core.deps import get_session_store
from app.models.session_models import Session
from app.services.session_store import SessionStore

# Initialize logger
logger = logging.getLogger(__name__)

session_token_header = APIKeyHeader(name="X-Session-Token", auto_error=False)


async def require_session(
    token: str | None = Depends(session_token_header),
    sessions: SessionStore = Depends(get_session_store),
) -> Session:
    """Returns the current session when the request carries its token.

    Used as a FastAPI dependency to protect routes.

    Args:
        token: The opaque token extracted from the 'X-Session-Token' header.
        sessions: The application's session store.

    Returns:
        The persisted session.

    Raises:
        HTTPException: With status code 401 if the token is missing, if no session
                       is active, or if the token does not match the persisted one.
    """
    if not token:
        raise HTTPException(status_code=401, detail="Session manquante.")

    expected = sessions.current_token()
    session = sessions.current_session()
    if session is None or expected is None:
        logger.info("Rejected request: no active session")
        raise HTTPException(status_code=401, detail="Aucune session active.")

    if not secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected request with a stale or invalid session token")
        raise HTTPException(status_code=401, detail="Session invalide.")
    return session
