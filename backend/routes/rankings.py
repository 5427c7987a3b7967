from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

import crud
from database import get_db
from models import Room
from schemas import RankingCreate, RankingResponse
from security import get_room_by_code, resolve_voter_name

router = APIRouter(prefix="/api/rooms/{room_code}/rankings", tags=["rankings"])

@router.get("/mine", response_model=Optional[RankingResponse])
async def my_ranking(
    request: Request,
    room: Room = Depends(get_room_by_code),
    db: AsyncSession = Depends(get_db)
):
    voter_name = resolve_voter_name(request, room)
    return await crud.get_user_ranking(db, room.id, voter_name)

@router.put("/", response_model=RankingResponse)
async def save_ranking(
    ranking_in: RankingCreate,
    request: Request,
    room: Room = Depends(get_room_by_code),
    db: AsyncSession = Depends(get_db)
):
    voter_name = resolve_voter_name(request, room, ranking_in.voter_name)
    return await crud.upsert_ranking(
        db, room.id, voter_name, ranking_in.first_option_id, ranking_in.second_option_id
    )
