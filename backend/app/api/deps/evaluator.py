from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, status

from app.clients.sheet_api import SheetApiClient
from app.config import load_settings
from app.models.directory import DirectoryData, User
from app.repositories.directory_repository import (
    DirectoryRepository,
    DirectoryUnavailableError,
)
from app.services.directory_service import find_user_by_phone
from app.services.normalization import normalize_phone
from app.services.scoring import ScoringPolicy


async def get_sheet_client() -> AsyncIterator[SheetApiClient]:
    settings = load_settings()
    client = SheetApiClient(
        url=settings.sheet_api_url,
        timeout=settings.sheet_api_timeout_seconds,
        retries=settings.sheet_api_retries,
    )
    try:
        yield client
    finally:
        await client.close()


def get_directory_repo(
    client: SheetApiClient = Depends(get_sheet_client),
) -> DirectoryRepository:
    return DirectoryRepository(client)


async def get_directory(
    repo: DirectoryRepository = Depends(get_directory_repo),
) -> DirectoryData:
    try:
        return await repo.load()
    except DirectoryUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc


def get_scoring_policy() -> ScoringPolicy:
    settings = load_settings()
    return ScoringPolicy(
        threshold=settings.pass_threshold,
        strategy=settings.score_strategy,
    )


def require_phone(x_evaluator_phone: str | None = Header(None)) -> str:
    phone = normalize_phone(x_evaluator_phone)
    if not phone:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing evaluator phone",
        )
    return phone


def require_evaluator(
    phone: str = Depends(require_phone),
    directory: DirectoryData = Depends(get_directory),
) -> User:
    user = find_user_by_phone(directory.users, phone)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Phone number not found",
        )
    return user
