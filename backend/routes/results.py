from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

import aggregation
import crud
from database import get_db
from models import Room
from schemas import ResultsResponse, VoteSummaryOut, RankingSummaryOut, RoomResponse
from security import get_room_by_code

router = APIRouter(prefix="/api/rooms/{room_code}/results", tags=["results"])

@router.get("", response_model=ResultsResponse)
async def get_results(
    room: Room = Depends(get_room_by_code),
    db: AsyncSession = Depends(get_db)
):
    options = await crud.list_options(db, room.id)
    votes = await crud.list_votes(db, room.id)
    rankings = await crud.list_rankings(db, room.id)

    tallies = aggregation.rank_summaries(aggregation.summarize_votes(options, votes))
    leading = aggregation.leading_score(tallies)

    summaries = []
    for tally in tallies:
        summary = VoteSummaryOut.model_validate(tally)
        summary.is_leader = aggregation.is_leader(tally, leading)
        summaries.append(summary)

    return ResultsResponse(
        room=RoomResponse.model_validate(room),
        has_votes=aggregation.has_votes(tallies),
        leading_score=leading,
        summaries=summaries,
        rankings=[
            RankingSummaryOut.model_validate(t)
            for t in aggregation.summarize_rankings(options, rankings)
        ],
    )
