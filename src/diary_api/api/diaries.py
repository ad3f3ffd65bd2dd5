"""Diary API routes.

All routes act on the caller's own entries; the author is always the
user in the bearer token, never a field in the request body.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from diary_api.auth.dependencies import CurrentIdentity, get_current_user
from diary_api.db.engine import get_db
from diary_api.schemas.diary import DiaryCreate, DiaryRead
from diary_api.services.diary_service import DiaryService
from diary_api.services.errors import StoreError

router = APIRouter(prefix="/diaries")


def _diary_svc(db: AsyncSession = Depends(get_db)) -> DiaryService:
    return DiaryService(db)


@router.post("", response_model=DiaryRead, status_code=201)
async def create_diary(
    body: DiaryCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: DiaryService = Depends(_diary_svc),
):
    """Write a diary entry. Grants the author the default permission."""
    try:
        return await svc.create_entry(uuid.UUID(identity.user_id), body.text)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("", response_model=list[DiaryRead])
async def list_diaries(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: DiaryService = Depends(_diary_svc),
):
    """List the caller's entries, newest first."""
    try:
        return await svc.list_entries(uuid.UUID(identity.user_id))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{diary_id}", response_model=DiaryRead)
async def get_diary(
    diary_id: uuid.UUID,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: DiaryService = Depends(_diary_svc),
):
    try:
        diary = await svc.get_entry(uuid.UUID(identity.user_id), diary_id)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not diary:
        raise HTTPException(status_code=404, detail="Diary entry not found")
    return diary
