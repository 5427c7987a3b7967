from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

import crud
import storage
from database import get_db
from errors import AdminAuthError, CottageError, ValidationError
from models import Room
from schemas import (
    AdminLogin, OptionCreate, OptionUpdate, OptionResponse, SeedResponse,
    DeleteOptionsResponse, ResetVotesResponse, ImageUploadResponse,
)
from security import get_room_by_code, verify_admin, check_admin_credential
from utils import parse_list_field

router = APIRouter(prefix="/api/rooms/{room_code}/admin", tags=["admin"])

@router.post("/login")
async def admin_login(
    login_in: AdminLogin,
    room: Room = Depends(get_room_by_code)
):
    if not check_admin_credential(room, login_in.password):
        raise AdminAuthError("Incorrect password")
    return {"ok": True}

@router.post("/options", response_model=OptionResponse)
async def create_option(
    option_in: OptionCreate,
    room: Room = Depends(verify_admin),
    db: AsyncSession = Depends(get_db)
):
    return await crud.create_option(db, room.id, option_in)

@router.post("/options/seed", response_model=SeedResponse)
async def seed_options(
    options_in: List[OptionCreate],
    room: Room = Depends(verify_admin),
    db: AsyncSession = Depends(get_db)
):
    created, skipped = await crud.seed_options(db, room.id, options_in)
    return SeedResponse(
        created=[OptionResponse.model_validate(o) for o in created],
        skipped=skipped,
    )

@router.patch("/options/{option_id}", response_model=OptionResponse)
async def update_option(
    option_id: str,
    option_in: OptionUpdate,
    room: Room = Depends(verify_admin),
    db: AsyncSession = Depends(get_db)
):
    return await crud.update_option(db, room.id, option_id, option_in)

@router.delete("/options", response_model=DeleteOptionsResponse)
async def delete_options(
    codes: str = Query(..., description="Comma separated option codes"),
    room: Room = Depends(verify_admin),
    db: AsyncSession = Depends(get_db)
):
    deleted = await crud.delete_options_by_code(db, room.id, parse_list_field(codes))
    remaining = await crud.list_options(db, room.id)
    return DeleteOptionsResponse(
        deleted=sorted(o.code for o in deleted),
        remaining=[o.code for o in remaining],
    )

@router.post("/votes/reset", response_model=ResetVotesResponse)
async def reset_votes(
    confirm: bool = False,
    room: Room = Depends(verify_admin),
    db: AsyncSession = Depends(get_db)
):
    if not confirm:
        raise ValidationError("Resetting votes cannot be undone, pass confirm=true")
    deleted = await crud.reset_votes(db, room.id)
    return ResetVotesResponse(deleted=deleted)

@router.post("/images", response_model=ImageUploadResponse)
async def upload_image(
    file: UploadFile = File(...),
    option_id: Optional[str] = Form(None, alias="optionId"),
    room: Room = Depends(verify_admin),
    db: AsyncSession = Depends(get_db)
):
    if option_id:
        # fail before writing anything for an unknown option
        await crud.get_option(db, room.id, option_id)

    url = await storage.save_image(room.id, file)

    option = None
    if option_id:
        try:
            updated = await crud.add_option_image(db, room.id, option_id, url)
        except CottageError:
            storage.remove_image(url)
            raise
        option = OptionResponse.model_validate(updated)
    return ImageUploadResponse(url=url, option=option)
