from pydantic import BaseModel, Field, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, List, Literal, Union, Dict

VoteValue = Literal["yes", "maybe", "no"]


class CamelModel(BaseModel):
    # JSON is camelCase, attributes and columns stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _iso_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat() + 'Z' if dt.tzinfo is None else dt.isoformat()


class RoomCreate(CamelModel):
    name: str = Field(..., max_length=100)
    admin_name: Optional[str] = Field(None, max_length=100)

class RoomResponse(CamelModel):
    id: str
    join_code: str
    name: str
    admin_name: Optional[str] = None
    created_at: datetime
    # admin_token is NOT returned here, only on creation response

    @field_serializer('created_at')
    def serialize_dt(self, dt: datetime, _info):
        return _iso_utc(dt)

class RoomCreatedResponse(RoomResponse):
    admin_token: str
    join_url: str
    results_url: str
    admin_url: str
    qr_code: str

class VoterSession(CamelModel):
    voter_name: Optional[str] = None

class VoterSessionUpdate(CamelModel):
    voter_name: str = Field(..., max_length=100)


class OptionCreate(CamelModel):
    code: str = Field(..., max_length=10)
    nickname: str = Field(..., max_length=100)
    title: str = Field(..., max_length=200)
    location: str = ""
    price_night: int = Field(0, ge=0)
    total_estimate: int = Field(0, ge=0)
    guests: int = Field(0, ge=0)
    beds: int = Field(0, ge=0)
    baths: float = Field(0, ge=0)
    # Either a list or the comma separated text typed into the admin form
    perks: Union[List[str], str] = Field(default_factory=list)
    airbnb_url: str = ""
    image_urls: Union[List[str], str] = Field(default_factory=list)
    notes: Optional[str] = None

class OptionUpdate(CamelModel):
    """Partial update: fields left out of the request keep their values."""

    code: Optional[str] = Field(None, max_length=10)
    nickname: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = None
    price_night: Optional[int] = Field(None, ge=0)
    total_estimate: Optional[int] = Field(None, ge=0)
    guests: Optional[int] = Field(None, ge=0)
    beds: Optional[int] = Field(None, ge=0)
    baths: Optional[float] = Field(None, ge=0)
    perks: Optional[Union[List[str], str]] = None
    airbnb_url: Optional[str] = None
    image_urls: Optional[Union[List[str], str]] = None
    notes: Optional[str] = None

class OptionResponse(CamelModel):
    id: str
    room_id: str
    code: str
    nickname: str
    title: str
    location: str
    price_night: int
    total_estimate: int
    guests: int
    beds: int
    baths: float
    perks: List[str]
    airbnb_url: str
    image_urls: List[str]
    notes: Optional[str] = None
    created_at: datetime

    @field_serializer('created_at')
    def serialize_dt(self, dt: datetime, _info):
        return _iso_utc(dt)

class SeedResponse(CamelModel):
    created: List[OptionResponse]
    skipped: List[str]

class DeleteOptionsResponse(CamelModel):
    deleted: List[str]
    remaining: List[str]


class VoteCreate(CamelModel):
    option_id: str
    vote_value: VoteValue
    # Falls back to the room's voter cookie when omitted
    voter_name: Optional[str] = None

class VoteResponse(CamelModel):
    id: str
    room_id: str
    voter_name: str
    option_id: str
    vote_value: VoteValue
    created_at: datetime

    @field_serializer('created_at')
    def serialize_dt(self, dt: datetime, _info):
        return _iso_utc(dt)

class MyVotesResponse(CamelModel):
    voter_name: str
    votes: Dict[str, VoteValue]

class ResetVotesResponse(CamelModel):
    deleted: int


class RankingCreate(CamelModel):
    first_option_id: str = ""
    second_option_id: str = ""
    voter_name: Optional[str] = None

class RankingResponse(CamelModel):
    id: str
    room_id: str
    voter_name: str
    first_option_id: str
    second_option_id: str
    created_at: datetime

    @field_serializer('created_at')
    def serialize_dt(self, dt: datetime, _info):
        return _iso_utc(dt)


class VoterVoteOut(CamelModel):
    name: str
    vote: VoteValue

class VoteSummaryOut(CamelModel):
    option: OptionResponse
    option_id: str
    yes: int
    maybe: int
    no: int
    total: int
    score: int
    yes_percent: float
    maybe_percent: float
    no_percent: float
    voters: List[VoterVoteOut]
    is_leader: bool = False

class RankingSummaryOut(CamelModel):
    option: OptionResponse
    option_id: str
    first_place_votes: int
    second_place_votes: int
    points: int

class ResultsResponse(CamelModel):
    room: RoomResponse
    has_votes: bool
    leading_score: Optional[int] = None
    summaries: List[VoteSummaryOut]
    rankings: List[RankingSummaryOut]


class AdminLogin(CamelModel):
    password: str

class ImageUploadResponse(CamelModel):
    url: str
    option: Optional[OptionResponse] = None
