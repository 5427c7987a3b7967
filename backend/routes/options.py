from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

import crud
from database import get_db
from models import Room
from schemas import OptionResponse
from security import get_room_by_code

router = APIRouter(prefix="/api/rooms/{room_code}/options", tags=["options"])

@router.get("/", response_model=List[OptionResponse])
async def list_options(
    room: Room = Depends(get_room_by_code),
    db: AsyncSession = Depends(get_db)
):
    return await crud.list_options(db, room.id)

@router.get("/{option_id}", response_model=OptionResponse)
async def get_option(
    option_id: str,
    room: Room = Depends(get_room_by_code),
    db: AsyncSession = Depends(get_db)
):
    return await crud.get_option(db, room.id, option_id)
