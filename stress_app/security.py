import secrets

from fastapi import Header, HTTPException

from stress_app.config import settings


def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
    """Reject requests whose X-API-Key header does not match API_KEY. An empty API_KEY disables the check."""
    if not settings.api_key:
        return
    if x_api_key is None or not secrets.compare_digest(x_api_key, settings.api_key):
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
