import hmac

from fastapi import Depends, HTTPException, Request, status

from shopledger.core.config import settings

ANONYMOUS_SESSION = "anonymous"


def _clean_candidate(value: str | None) -> str | None:
    if not value:
        return None
    cleaned = value.strip().strip("\"'").strip()
    return cleaned or None


def get_session_id(request: Request) -> str:
    return (
        _clean_candidate(request.headers.get("x-session-id"))
        or _clean_candidate(request.cookies.get("session_id"))
        or ANONYMOUS_SESSION
    )


def require_session(request: Request, session_id: str = Depends(get_session_id)) -> str:
    """Single session-flag check; a no-op unless SESSION_AUTH_ENABLED is set."""
    if not settings.session_auth_enabled:
        return session_id

    flag = _clean_candidate(request.headers.get("x-session-auth")) or _clean_candidate(request.cookies.get("auth"))
    if not flag or not settings.session_secret or not hmac.compare_digest(
        flag.encode("utf-8"), settings.session_secret.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session is not authenticated",
        )
    return session_id
