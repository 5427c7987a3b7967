from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, Text, JSON, Enum, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from database import Base
import utils

VOTE_VALUES = ("yes", "maybe", "no")

class Room(Base):
    __tablename__ = "rooms"

    id = Column(String, primary_key=True, default=utils.generate_uuid)
    join_code = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    admin_name = Column(String, nullable=True)
    admin_token = Column(String, nullable=False)
    created_at = Column(DateTime, default=utils.get_utc_now)

    options = relationship("Option", back_populates="room")

class Option(Base):
    __tablename__ = "options"

    id = Column(String, primary_key=True, default=utils.generate_uuid)
    room_id = Column(String, ForeignKey("rooms.id"), nullable=False, index=True)
    code = Column(String, nullable=False)
    nickname = Column(String, nullable=False)
    title = Column(String, nullable=False)
    location = Column(String, nullable=False, default="")
    price_night = Column(Integer, nullable=False, default=0)
    total_estimate = Column(Integer, nullable=False, default=0)
    guests = Column(Integer, nullable=False, default=0)
    beds = Column(Integer, nullable=False, default=0)
    baths = Column(Float, nullable=False, default=0)
    perks = Column(JSON, nullable=False, default=list)
    airbnb_url = Column(String, nullable=False, default="")
    image_urls = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utils.get_utc_now)

    room = relationship("Room", back_populates="options")
    votes = relationship("Vote", back_populates="option")

    __table_args__ = (
        UniqueConstraint("room_id", "code", name="uq_options_room_code"),
    )

class Vote(Base):
    __tablename__ = "votes"

    id = Column(String, primary_key=True, default=utils.generate_uuid)
    room_id = Column(String, ForeignKey("rooms.id"), nullable=False)
    voter_name = Column(String, nullable=False)
    option_id = Column(String, ForeignKey("options.id"), nullable=False)
    vote_value = Column(Enum(*VOTE_VALUES, name="vote_value"), nullable=False)
    created_at = Column(DateTime, default=utils.get_utc_now)

    option = relationship("Option", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("room_id", "voter_name", "option_id", name="uq_votes_room_voter_option"),
        Index("idx_votes_room", "room_id"),
    )

class Ranking(Base):
    __tablename__ = "rankings"

    id = Column(String, primary_key=True, default=utils.generate_uuid)
    room_id = Column(String, ForeignKey("rooms.id"), nullable=False)
    voter_name = Column(String, nullable=False)
    first_option_id = Column(String, ForeignKey("options.id"), nullable=False)
    second_option_id = Column(String, ForeignKey("options.id"), nullable=False)
    created_at = Column(DateTime, default=utils.get_utc_now)

    __table_args__ = (
        UniqueConstraint("room_id", "voter_name", name="uq_rankings_room_voter"),
    )
