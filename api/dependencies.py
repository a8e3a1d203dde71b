"""
Dependency injection utilities for FastAPI.

This module provides reusable dependencies for the storage backend,
authentication, and upload checks.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, HTTPException, Header, Request, status

from api.config import Settings, settings
from services.errors import StoreUnavailable
from services.storage_service import IStorage

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return getattr(request.app.state, 'settings', settings)


def get_storage(request: Request) -> IStorage:
    """
    Get the storage backend dependency.

    The storage is created once in the application lifespan and kept on
    app.state; handlers never construct their own.

    Usage:
        @app.get("/endpoint")
        def endpoint(storage: IStorage = Depends(get_storage)):
            # Use storage
            pass
    """
    storage = getattr(request.app.state, 'storage', None)
    if storage is None:
        raise StoreUnavailable("Storage backend is not initialized")
    return storage


def get_api_key(
    x_api_key: str = Header(None, alias=settings.API_KEY_HEADER),
    config: Settings = Depends(get_app_settings)
) -> str:
    """
    Validate API key from header.

    Args:
        x_api_key: API key from request header
        config: Settings of the running application

    Returns:
        Validated API key

    Raises:
        HTTPException: If API key auth is enabled and the key is missing
    """
    if not config.ENABLE_API_KEY_AUTH:
        # API key auth disabled - allow all requests
        return "public"

    if not x_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required",
            headers={"WWW-Authenticate": "ApiKey"}
        )

    return x_api_key


def get_current_user(api_key: str = Depends(get_api_key)) -> str:
    """
    Get current user from API key.

    Returns:
        User identifier (the API key itself; there are no user accounts)
    """
    return api_key


def verify_file_size(file_size: int, config: Optional[Settings] = None) -> bool:
    """
    Verify uploaded file size is within limit.

    Args:
        file_size: File size in bytes
        config: Settings to check against (default: global settings)

    Returns:
        True if size is acceptable

    Raises:
        HTTPException: If file is too large
    """
    config = config or settings
    max_size_bytes = config.MAX_FILE_SIZE_MB * 1024 * 1024

    if file_size > max_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size ({file_size / 1024 / 1024:.1f} MB) exceeds maximum allowed "
                   f"({config.MAX_FILE_SIZE_MB} MB)"
        )

    return True


def verify_file_extension(filename: str, config: Optional[Settings] = None) -> bool:
    """
    Verify file has allowed extension.

    Args:
        filename: Name of uploaded file
        config: Settings to check against (default: global settings)

    Returns:
        True if extension is allowed

    Raises:
        HTTPException: If extension is not allowed
    """
    config = config or settings
    ext = Path(filename or '').suffix.lower()

    if ext not in [e.lower() for e in config.ALLOWED_EXTENSIONS]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File extension '{ext}' not allowed. "
                   f"Allowed extensions: {', '.join(config.ALLOWED_EXTENSIONS)}"
        )

    return True
