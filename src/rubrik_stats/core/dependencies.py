import threading

from fastapi import Depends, HTTPException, Security
from fastapi.security import APIKeyHeader

from rubrik_stats.core.client import RubrikClient
from rubrik_stats.core.config import settings
from rubrik_stats.services.stats_service import StatsService

# Define the API Key security scheme for Swagger UI integration
api_key_header = APIKeyHeader(name="x-api-token", auto_error=True)

_client: RubrikClient | None = None
_client_lock = threading.Lock()


async def verify_api_token(api_key: str = Security(api_key_header)):
    """
    Validates the API token from the header.
    An unset API_SECRET_TOKEN rejects every request.
    """
    if not settings.API_SECRET_TOKEN or api_key != settings.API_SECRET_TOKEN:
        raise HTTPException(status_code=401, detail="Invalid API Token")
    return api_key


def get_rubrik_client() -> RubrikClient:
    """One logged-in client per process, so every request shares the same session.

    Construction happens under a lock; concurrent first requests log in once.
    """
    global _client
    with _client_lock:
        if _client is None:
            _client = RubrikClient()
        return _client


def close_rubrik_client():
    """Logs out and drops the shared client, if one was created."""
    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
            _client = None


def get_stats_service(client: RubrikClient = Depends(get_rubrik_client)) -> StatsService:
    return StatsService(client)
