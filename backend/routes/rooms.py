from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from urllib.parse import quote

import config
import crud
from database import get_db
from errors import ValidationError
from models import Room
from schemas import RoomCreate, RoomCreatedResponse, RoomResponse, VoterSession, VoterSessionUpdate
from utils import generate_qr_code_base64, room_links, voter_cookie_name
from security import get_room_by_code, read_voter_cookie

router = APIRouter(prefix="/api/rooms", tags=["rooms"])

VOTER_COOKIE_MAX_AGE = 60 * 60 * 24 * 365

@router.post("/", response_model=RoomCreatedResponse)
async def create_room(room_in: RoomCreate, db: AsyncSession = Depends(get_db)):
    room = await crud.create_room(db, room_in.name, room_in.admin_name)

    links = room_links(config.get_frontend_url(), room.join_code)
    qr_base64 = generate_qr_code_base64(links["join_url"])

    return RoomCreatedResponse(
        id=room.id,
        join_code=room.join_code,
        name=room.name,
        admin_name=room.admin_name,
        created_at=room.created_at,
        admin_token=room.admin_token,
        qr_code=qr_base64,
        **links,
    )

# Declared before /{room_code} so "join" is never read as a code
@router.get("/join", response_model=RoomResponse)
async def join_room(
    input: str = Query(..., description="Join code or a pasted room link"),
    db: AsyncSession = Depends(get_db)
):
    return await crud.resolve_room(db, input)

@router.get("/{room_code}", response_model=RoomResponse)
async def get_room(
    room: Room = Depends(get_room_by_code)
):
    return room

# --- Voter session ---

@router.get("/{room_code}/session", response_model=VoterSession)
async def get_session(
    request: Request,
    room: Room = Depends(get_room_by_code)
):
    return VoterSession(voter_name=read_voter_cookie(request, room.join_code))

@router.put("/{room_code}/session", response_model=VoterSession)
async def set_session(
    session_in: VoterSessionUpdate,
    response: Response,
    room: Room = Depends(get_room_by_code)
):
    name = session_in.voter_name.strip()
    if not name:
        raise ValidationError("Please enter your name to vote")

    response.set_cookie(
        voter_cookie_name(room.join_code),
        quote(name),
        max_age=VOTER_COOKIE_MAX_AGE,
        samesite="lax",
    )
    return VoterSession(voter_name=name)

@router.delete("/{room_code}/session", response_model=VoterSession)
async def clear_session(
    response: Response,
    room: Room = Depends(get_room_by_code)
):
    response.delete_cookie(voter_cookie_name(room.join_code))
    return VoterSession(voter_name=None)
