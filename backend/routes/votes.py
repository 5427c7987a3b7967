from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

import crud
from database import get_db
from models import Room
from schemas import VoteCreate, VoteResponse, MyVotesResponse
from security import get_room_by_code, resolve_voter_name

router = APIRouter(prefix="/api/rooms/{room_code}/votes", tags=["votes"])

@router.get("/", response_model=List[VoteResponse])
async def list_votes(
    room: Room = Depends(get_room_by_code),
    db: AsyncSession = Depends(get_db)
):
    return await crud.list_votes(db, room.id)

@router.get("/mine", response_model=MyVotesResponse)
async def my_votes(
    request: Request,
    room: Room = Depends(get_room_by_code),
    db: AsyncSession = Depends(get_db)
):
    voter_name = resolve_voter_name(request, room)
    votes = await crud.get_user_votes(db, room.id, voter_name)
    return MyVotesResponse(voter_name=voter_name, votes=votes)

@router.put("/", response_model=VoteResponse)
async def cast_vote(
    vote_in: VoteCreate,
    request: Request,
    room: Room = Depends(get_room_by_code),
    db: AsyncSession = Depends(get_db)
):
    voter_name = resolve_voter_name(request, room, vote_in.voter_name)
    return await crud.upsert_vote(db, room.id, voter_name, vote_in.option_id, vote_in.vote_value)
