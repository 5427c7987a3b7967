from fastapi import Depends, Header, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from urllib.parse import unquote
import hmac

import config
import crud
from database import get_db
from errors import AdminAuthError, ValidationError
from models import Room
from utils import voter_cookie_name

async def get_room_by_code(
    room_code: str = Path(..., min_length=6, max_length=8),
    db: AsyncSession = Depends(get_db)
) -> Room:
    """Dependency to fetch a room by its join code."""
    return await crud.get_room_by_join_code(db, room_code)

def check_admin_credential(room: Room, credential: Optional[str]) -> bool:
    """Accepts the room's own admin token or the shared ADMIN_PASSWORD, if one is set."""
    if not credential:
        return False
    if hmac.compare_digest(credential.encode(), room.admin_token.encode()):
        return True
    if config.ADMIN_PASSWORD and hmac.compare_digest(credential.encode(), config.ADMIN_PASSWORD.encode()):
        return True
    return False

async def verify_admin(
    room: Room = Depends(get_room_by_code),
    x_admin_token: Optional[str] = Header(None),
) -> Room:
    """Dependency to verify admin access to a room."""
    if not check_admin_credential(room, x_admin_token):
        raise AdminAuthError("Invalid admin credentials")
    return room

def read_voter_cookie(request: Request, join_code: str) -> Optional[str]:
    value = request.cookies.get(voter_cookie_name(join_code))
    if not value:
        return None
    return unquote(value).strip() or None

def resolve_voter_name(request: Request, room: Room, supplied: Optional[str] = None) -> str:
    """Who is voting: the name in the request body, else the room's voter cookie."""
    name = (supplied or "").strip() or read_voter_cookie(request, room.join_code)
    if not name:
        raise ValidationError("Please enter your name to vote")
    return name
