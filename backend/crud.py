"""
Room-scoped data access.

Every query is filtered by the owning room. Store failures surface as
``StoreError`` (``DuplicateKeyError`` for unique violations) after the
session is rolled back; nothing here retries.
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, delete, desc, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import NotFoundError, ValidationError, StoreError, DuplicateKeyError
from models import Room, Option, Vote, Ranking, VOTE_VALUES
from schemas import OptionCreate, OptionUpdate
import utils

logger = logging.getLogger(__name__)

JOIN_CODE_ATTEMPTS = 5
REQUIRED_OPTION_FIELDS = ("code", "nickname", "title")


UNIQUE_VIOLATION_SQLSTATE = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    # older asyncpg adapters only keep the code on the driver exception
    sqlstate = (
        getattr(orig, "sqlstate", None)
        or getattr(orig, "pgcode", None)
        or getattr(getattr(orig, "__cause__", None), "sqlstate", None)
    )
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    # sqlite reports no SQLSTATE
    return "UNIQUE constraint failed" in str(orig)


@asynccontextmanager
async def _store_errors(db: AsyncSession, action: str, savepoint: bool = False):
    """Translates store failures for ``action``.

    With ``savepoint`` the block runs in a SAVEPOINT and a failure only undoes
    that block; otherwise the whole session is rolled back, which expires every
    instance it holds.
    """
    try:
        if savepoint:
            async with db.begin_nested():
                yield
        else:
            yield
    except IntegrityError as exc:
        if not savepoint:
            await db.rollback()
        if _is_unique_violation(exc):
            logger.warning("Duplicate key while trying to %s: %s", action, exc.orig)
            raise DuplicateKeyError(f"Could not {action}: already exists") from exc
        logger.exception("Integrity error while trying to %s", action)
        raise StoreError(f"Could not {action}") from exc
    except SQLAlchemyError as exc:
        if not savepoint:
            await db.rollback()
        logger.exception("Store error while trying to %s", action)
        raise StoreError(f"Could not {action}") from exc


def _clean_voter_name(voter_name: Optional[str]) -> str:
    name = (voter_name or "").strip()
    if not name:
        raise ValidationError("Please enter your name to vote")
    return name


# --- Rooms ---

async def create_room(db: AsyncSession, name: str, admin_name: Optional[str] = None) -> Room:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter a room name")

    async with _store_errors(db, "create room"):
        for _ in range(JOIN_CODE_ATTEMPTS):
            join_code = utils.generate_join_code()
            existing = await db.execute(select(Room.id).where(Room.join_code == join_code))
            if existing.scalars().first() is None:
                break
        else:
            raise StoreError("Could not generate unique room code")

        room = Room(
            join_code=join_code,
            name=name,
            admin_name=(admin_name or "").strip() or None,
            admin_token=utils.generate_admin_token(),
        )
        db.add(room)
        await db.commit()
        await db.refresh(room)

    logger.info("Created room %s (%s)", room.join_code, room.name)
    return room

async def get_room_by_join_code(db: AsyncSession, join_code: str) -> Room:
    async with _store_errors(db, "load room"):
        result = await db.execute(select(Room).where(Room.join_code == join_code.strip().upper()))
        room = result.scalars().first()
    if room is None:
        raise NotFoundError("Room not found")
    return room

async def resolve_room(db: AsyncSession, raw: str) -> Room:
    """Finds the room for a bare join code or a pasted ``/r/<code>`` link."""
    join_code = utils.extract_join_code(raw)
    if not join_code:
        raise ValidationError("Please enter a room code")
    return await get_room_by_join_code(db, join_code)


# --- Options ---

async def list_options(db: AsyncSession, room_id: str) -> List[Option]:
    async with _store_errors(db, "load options"):
        result = await db.execute(
            select(Option).where(Option.room_id == room_id).order_by(Option.code)
        )
        return list(result.scalars().all())

async def get_option(db: AsyncSession, room_id: str, option_id: str) -> Option:
    async with _store_errors(db, "load option"):
        result = await db.execute(
            select(Option).where(Option.id == option_id, Option.room_id == room_id)
        )
        option = result.scalars().first()
    if option is None:
        raise NotFoundError("Option not found")
    return option

def _normalize_option_fields(fields: dict) -> dict:
    for key in REQUIRED_OPTION_FIELDS:
        if key in fields:
            value = (fields[key] or "").strip()
            if not value:
                raise ValidationError(f"Option {key} is required")
            fields[key] = value
    if "code" in fields:
        fields["code"] = fields["code"].upper()
    for key in ("perks", "image_urls"):
        if key in fields:
            fields[key] = utils.parse_list_field(fields[key])
    return fields

async def create_option(db: AsyncSession, room_id: str, option_in: OptionCreate) -> Option:
    fields = _normalize_option_fields(option_in.model_dump())

    action = f"create option {fields['code']}"
    option = Option(room_id=room_id, **fields)
    # a duplicate code only undoes this insert, earlier work in the session survives
    async with _store_errors(db, action, savepoint=True):
        db.add(option)
    async with _store_errors(db, action):
        await db.commit()
        await db.refresh(option)

    logger.info("Created option %s in room %s", option.code, room_id)
    return option

async def update_option(db: AsyncSession, room_id: str, option_id: str, option_in: OptionUpdate) -> Option:
    supplied = option_in.model_dump(exclude_unset=True)
    # explicit nulls only clear notes, every other column is required
    supplied = {k: v for k, v in supplied.items() if v is not None or k == "notes"}
    changes = _normalize_option_fields(supplied)
    option = await get_option(db, room_id, option_id)

    async with _store_errors(db, f"update option {option.code}"):
        for key, value in changes.items():
            setattr(option, key, value)
        await db.commit()
        await db.refresh(option)
    return option

async def add_option_image(db: AsyncSession, room_id: str, option_id: str, url: str) -> Option:
    option = await get_option(db, room_id, option_id)
    async with _store_errors(db, f"update option {option.code}"):
        # new list so the JSON column is flagged dirty
        option.image_urls = list(option.image_urls or []) + [url]
        await db.commit()
        await db.refresh(option)
    return option

async def seed_options(db: AsyncSession, room_id: str, options_in: Iterable[OptionCreate]) -> Tuple[List[Option], List[str]]:
    """Creates each option, skipping codes that already exist in the room."""
    created, skipped = [], []
    for option_in in options_in:
        try:
            created.append(await create_option(db, room_id, option_in))
        except DuplicateKeyError:
            code = option_in.code.strip().upper()
            logger.info("Option %s already exists in room %s, skipping", code, room_id)
            skipped.append(code)
    return created, skipped

async def delete_options_by_code(db: AsyncSession, room_id: str, codes: Iterable[str]) -> List[Option]:
    """Deletes options and their votes; ranking cleanup is best-effort."""
    codes = [c.strip().upper() for c in codes if c and c.strip()]
    if not codes:
        return []

    async with _store_errors(db, "load options"):
        result = await db.execute(
            select(Option).where(Option.room_id == room_id, Option.code.in_(codes))
        )
        options = list(result.scalars().all())
    if not options:
        return []

    option_ids = [o.id for o in options]
    deleted_codes = [o.code for o in options]

    async with _store_errors(db, "delete votes"):
        await db.execute(delete(Vote).where(Vote.room_id == room_id, Vote.option_id.in_(option_ids)))
        await db.commit()

    try:
        async with db.begin_nested():
            await db.execute(
                delete(Ranking).where(
                    Ranking.room_id == room_id,
                    or_(Ranking.first_option_id.in_(option_ids), Ranking.second_option_id.in_(option_ids)),
                )
            )
    except SQLAlchemyError as exc:
        logger.warning("Rankings cleanup failed for options %s: %s", deleted_codes, exc)

    async with _store_errors(db, "delete options"):
        await db.execute(delete(Option).where(Option.room_id == room_id, Option.id.in_(option_ids)))
        await db.commit()

    logger.info("Deleted options %s from room %s", deleted_codes, room_id)
    return options


# --- Votes ---

async def list_votes(db: AsyncSession, room_id: str) -> List[Vote]:
    async with _store_errors(db, "load votes"):
        result = await db.execute(
            select(Vote).where(Vote.room_id == room_id).order_by(desc(Vote.created_at))
        )
        return list(result.scalars().all())

async def get_user_vote(db: AsyncSession, room_id: str, voter_name: str, option_id: str) -> Optional[Vote]:
    async with _store_errors(db, "load vote"):
        result = await db.execute(
            select(Vote).where(
                Vote.room_id == room_id,
                Vote.voter_name == voter_name,
                Vote.option_id == option_id,
            )
        )
        return result.scalars().first()

async def get_user_votes(db: AsyncSession, room_id: str, voter_name: str) -> Dict[str, str]:
    async with _store_errors(db, "load votes"):
        result = await db.execute(
            select(Vote).where(Vote.room_id == room_id, Vote.voter_name == voter_name)
        )
        return {vote.option_id: vote.vote_value for vote in result.scalars().all()}

async def upsert_vote(db: AsyncSession, room_id: str, voter_name: str, option_id: str, value: str) -> Vote:
    """One vote per (room, voter, option): update the value if it exists, else insert."""
    voter_name = _clean_voter_name(voter_name)
    if value not in VOTE_VALUES:
        raise ValidationError(f"Vote must be one of {', '.join(VOTE_VALUES)}")
    await get_option(db, room_id, option_id)

    existing = await get_user_vote(db, room_id, voter_name, option_id)

    async with _store_errors(db, "save vote"):
        if existing:
            existing.vote_value = value
            vote = existing
        else:
            vote = Vote(room_id=room_id, voter_name=voter_name, option_id=option_id, vote_value=value)
            db.add(vote)
        await db.commit()
        await db.refresh(vote)
    return vote

async def reset_votes(db: AsyncSession, room_id: str) -> int:
    async with _store_errors(db, "reset votes"):
        result = await db.execute(delete(Vote).where(Vote.room_id == room_id))
        await db.commit()
    logger.info("Reset %s votes in room %s", result.rowcount, room_id)
    return result.rowcount


# --- Rankings ---

async def list_rankings(db: AsyncSession, room_id: str) -> List[Ranking]:
    async with _store_errors(db, "load rankings"):
        result = await db.execute(select(Ranking).where(Ranking.room_id == room_id))
        return list(result.scalars().all())

async def get_user_ranking(db: AsyncSession, room_id: str, voter_name: str) -> Optional[Ranking]:
    async with _store_errors(db, "load ranking"):
        result = await db.execute(
            select(Ranking).where(Ranking.room_id == room_id, Ranking.voter_name == voter_name)
        )
        return result.scalars().first()

async def upsert_ranking(db: AsyncSession, room_id: str, voter_name: str, first_option_id: str, second_option_id: str) -> Ranking:
    voter_name = _clean_voter_name(voter_name)
    if not first_option_id or not second_option_id:
        raise ValidationError("Please select both your top 2 choices")
    if first_option_id == second_option_id:
        raise ValidationError("Your top 2 choices must be different")
    await get_option(db, room_id, first_option_id)
    await get_option(db, room_id, second_option_id)

    existing = await get_user_ranking(db, room_id, voter_name)

    async with _store_errors(db, "save ranking"):
        if existing:
            existing.first_option_id = first_option_id
            existing.second_option_id = second_option_id
            ranking = existing
        else:
            ranking = Ranking(
                room_id=room_id,
                voter_name=voter_name,
                first_option_id=first_option_id,
                second_option_id=second_option_id,
            )
            db.add(ranking)
        await db.commit()
        await db.refresh(ranking)
    return ranking
