#!/usr/bin/env python3
"""
Delete options (and their votes and rankings) from a room.

    python delete_options.py ABC123 E F
"""

import argparse
import asyncio
import logging
import sys

import crud
from database import SessionLocal
from errors import CottageError

logger = logging.getLogger("delete_options")


async def delete_options(db, join_code: str, codes):
    """Returns the deleted options and the codes left in the room."""
    room = await crud.get_room_by_join_code(db, join_code)
    deleted = await crud.delete_options_by_code(db, room.id, codes)
    remaining = await crud.list_options(db, room.id)
    return deleted, remaining


async def run(join_code: str, codes) -> int:
    async with SessionLocal() as db:
        try:
            deleted, remaining = await delete_options(db, join_code, codes)
        except CottageError as exc:
            logger.error("Deletion failed: %s", exc.detail)
            return 1

    if not deleted:
        print(f"Options {', '.join(codes)} do not exist in room {join_code.upper()} (already deleted)")
    else:
        for option in deleted:
            print(f"Deleted {option.code}: {option.nickname}")
    print("Remaining options:")
    for option in remaining:
        print(f"  {option.code}: {option.nickname}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Delete options from a room by code")
    parser.add_argument("room", help="room join code")
    parser.add_argument("codes", nargs="+", help="option codes to delete")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(name)s | %(message)s")
    return asyncio.run(run(args.room, args.codes))


if __name__ == "__main__":
    sys.exit(main())
