"""
FastAPI dependencies (settings, remote API client, snapshot)
"""
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from xrozen.application.snapshot import Snapshot, SnapshotLoader
from xrozen.config import Settings, get_settings
from xrozen.infrastructure.api_client import RemoteApiClient, UnauthorizedError


def bearer_token(request: Request) -> Optional[str]:
    """Token from "Authorization: Bearer <token>", None if absent."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_api_client(request: Request, settings: Settings = Depends(get_settings)) -> RemoteApiClient:
    """
    Client acting with the caller's token

    Raises:
        HTTPException(401): no bearer token
    """
    token = bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return RemoteApiClient.from_settings(settings, token=token)


def _is_service_token(token: Optional[str], settings: Settings) -> bool:
    if not token or not settings.API_SERVICE_TOKEN:
        return False
    return secrets.compare_digest(token, settings.API_SERVICE_TOKEN)


def get_snapshot(
    request: Request,
    client: RemoteApiClient = Depends(get_api_client),
    settings: Settings = Depends(get_settings),
) -> Snapshot:
    """
    Snapshot for the current request, loaded with the caller's token

    The background-refreshed snapshot belongs to the service account and is
    served only to callers presenting API_SERVICE_TOKEN.

    Raises:
        HTTPException(401): the token was rejected by the remote API
    """
    if _is_service_token(client.token, settings):
        store = getattr(request.app.state, "snapshot_store", None)
        cached = store.current if store is not None else None
        if cached is not None:
            return cached

    try:
        return SnapshotLoader(client).load()
    except UnauthorizedError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - please login again"
        )
