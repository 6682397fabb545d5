from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    func,
    select,
)
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..auth.users import hash_password
from .models import (
    Club,
    ClubCreate,
    ClubFollower,
    ClubUpdate,
    Event,
    EventCreate,
    EventUpdate,
    Rsvp,
    RsvpStatus,
    User,
    UserCreate,
    UserUpdate,
)

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on read; stored values are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), nullable=False, unique=True)
    password_hash = Column(String(128), nullable=False)
    name = Column(String(200), nullable=False)
    major = Column(String(200), default="Undeclared")
    year = Column(String(50), default="1st Year")
    interests = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


class EventRow(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(String(100), nullable=False)
    time = Column(String(100), nullable=False)
    location = Column(String(200), nullable=False)
    categories = Column(JSON, nullable=False, default=list)
    image_url = Column(Text)
    featured = Column(Boolean, default=False)
    organizer_id = Column(Integer, ForeignKey("users.id"))
    organizer = Column(String(200), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


class RsvpRow(Base):
    __tablename__ = "rsvps"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_rsvp_event_user"),)

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


class ClubRow(Base):
    __tablename__ = "clubs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    categories = Column(JSON, nullable=False, default=list)
    image_url = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


class ClubFollowerRow(Base):
    __tablename__ = "club_followers"
    __table_args__ = (UniqueConstraint("club_id", "user_id", name="uq_follower_club_user"),)

    id = Column(Integer, primary_key=True, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


# ── Row → record conversion ──────────────────────────────────────────────


def _user(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        name=row.name,
        major=row.major or "Undeclared",
        year=row.year or "1st Year",
        interests=list(row.interests or []),
        created_at=_utc(row.created_at),
    )


def _event(row: EventRow, attendees: int = 0) -> Event:
    return Event(
        id=row.id,
        title=row.title,
        description=row.description,
        date=row.date,
        time=row.time,
        location=row.location,
        categories=list(row.categories or []),
        organizer_id=row.organizer_id,
        organizer=row.organizer,
        image_url=row.image_url,
        featured=bool(row.featured),
        created_at=_utc(row.created_at),
        attendees=attendees,
    )


def _rsvp(row: RsvpRow) -> Rsvp:
    return Rsvp(
        id=row.id,
        event_id=row.event_id,
        user_id=row.user_id,
        status=RsvpStatus(row.status),
        created_at=_utc(row.created_at),
    )


def _club(row: ClubRow, followers: int = 0) -> Club:
    return Club(
        id=row.id,
        name=row.name,
        description=row.description,
        categories=list(row.categories or []),
        image_url=row.image_url,
        created_at=_utc(row.created_at),
        followers=followers,
    )


def _follower(row: ClubFollowerRow) -> ClubFollower:
    return ClubFollower(
        id=row.id,
        club_id=row.club_id,
        user_id=row.user_id,
        created_at=_utc(row.created_at),
    )


class SQLStore:
    """Relational store; identifiers come from the database's sequences."""

    def __init__(self, database_url: str) -> None:
        engine_kwargs: dict = {}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
                engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(database_url, **engine_kwargs)
        Base.metadata.create_all(bind=self.engine)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ── Users ────────────────────────────────────────────────────────────

    def get_user(self, user_id: int) -> User | None:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            return _user(row) if row else None

    def get_user_by_username(self, username: str) -> User | None:
        with self._session() as session:
            row = session.scalars(select(UserRow).where(UserRow.username == username)).first()
            return _user(row) if row else None

    def create_user(self, data: UserCreate) -> User:
        with self._session() as session:
            row = UserRow(
                password_hash=hash_password(data.password),
                **data.model_dump(exclude={"password"}),
            )
            session.add(row)
            session.flush()
            return _user(row)

    def update_user(self, user_id: int, data: UserUpdate) -> User | None:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            if row is None:
                return None
            for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(row, key, value)
            session.flush()
            return _user(row)

    # ── Events ───────────────────────────────────────────────────────────

    def _attendee_counts(self, session: Session) -> dict[int, int]:
        stmt = (
            select(RsvpRow.event_id, func.count(RsvpRow.id))
            .where(RsvpRow.status == RsvpStatus.attending.value)
            .group_by(RsvpRow.event_id)
        )
        return {event_id: count for event_id, count in session.execute(stmt)}

    def _events_where(self, *criteria) -> list[Event]:
        with self._session() as session:
            counts = self._attendee_counts(session)
            rows = session.scalars(select(EventRow).where(*criteria).order_by(EventRow.id))
            return [_event(row, counts.get(row.id, 0)) for row in rows]

    def list_events(self) -> list[Event]:
        return self._events_where()

    def get_event(self, event_id: int) -> Event | None:
        events = self._events_where(EventRow.id == event_id)
        return events[0] if events else None

    def list_events_by_organizer(self, organizer_id: int) -> list[Event]:
        return self._events_where(EventRow.organizer_id == organizer_id)

    def list_events_by_user(self, user_id: int) -> list[Event]:
        rsvp_events = select(RsvpRow.event_id).where(RsvpRow.user_id == user_id)
        return self._events_where(EventRow.id.in_(rsvp_events))

    def create_event(
        self, data: EventCreate, organizer_id: int | None, organizer: str
    ) -> Event:
        with self._session() as session:
            row = EventRow(organizer_id=organizer_id, organizer=organizer, **data.model_dump())
            session.add(row)
            session.flush()
            return _event(row)

    def update_event(self, event_id: int, data: EventUpdate) -> Event | None:
        with self._session() as session:
            row = session.get(EventRow, event_id)
            if row is None:
                return None
            for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(row, key, value)
        return self.get_event(event_id)

    def delete_event(self, event_id: int) -> bool:
        with self._session() as session:
            row = session.get(EventRow, event_id)
            if row is None:
                return False
            session.query(RsvpRow).filter(RsvpRow.event_id == event_id).delete()
            session.delete(row)
            return True

    # ── RSVPs ────────────────────────────────────────────────────────────

    def list_rsvps(self, event_id: int) -> list[Rsvp]:
        with self._session() as session:
            rows = session.scalars(
                select(RsvpRow).where(RsvpRow.event_id == event_id).order_by(RsvpRow.id)
            )
            return [_rsvp(row) for row in rows]

    def list_rsvps_by_user(self, user_id: int) -> list[Rsvp]:
        with self._session() as session:
            rows = session.scalars(
                select(RsvpRow).where(RsvpRow.user_id == user_id).order_by(RsvpRow.id)
            )
            return [_rsvp(row) for row in rows]

    def create_rsvp(self, event_id: int, user_id: int, status: RsvpStatus) -> Rsvp:
        with self._session() as session:
            row = session.scalars(
                select(RsvpRow).where(RsvpRow.event_id == event_id, RsvpRow.user_id == user_id)
            ).first()
            if row is None:
                row = RsvpRow(event_id=event_id, user_id=user_id, status=status.value)
                session.add(row)
            else:
                row.status = status.value
            session.flush()
            return _rsvp(row)

    def delete_rsvp(self, event_id: int, user_id: int) -> bool:
        with self._session() as session:
            deleted = (
                session.query(RsvpRow)
                .filter(RsvpRow.event_id == event_id, RsvpRow.user_id == user_id)
                .delete()
            )
            return deleted > 0

    # ── Clubs ────────────────────────────────────────────────────────────

    def _clubs_where(self, *criteria) -> list[Club]:
        with self._session() as session:
            counts = dict(
                session.execute(
                    select(ClubFollowerRow.club_id, func.count(ClubFollowerRow.id))
                    .group_by(ClubFollowerRow.club_id)
                ).all()
            )
            rows = session.scalars(select(ClubRow).where(*criteria).order_by(ClubRow.id))
            return [_club(row, counts.get(row.id, 0)) for row in rows]

    def list_clubs(self) -> list[Club]:
        return self._clubs_where()

    def get_club(self, club_id: int) -> Club | None:
        clubs = self._clubs_where(ClubRow.id == club_id)
        return clubs[0] if clubs else None

    def create_club(self, data: ClubCreate) -> Club:
        with self._session() as session:
            row = ClubRow(**data.model_dump())
            session.add(row)
            session.flush()
            return _club(row)

    def update_club(self, club_id: int, data: ClubUpdate) -> Club | None:
        with self._session() as session:
            row = session.get(ClubRow, club_id)
            if row is None:
                return None
            for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(row, key, value)
        return self.get_club(club_id)

    def delete_club(self, club_id: int) -> bool:
        with self._session() as session:
            row = session.get(ClubRow, club_id)
            if row is None:
                return False
            session.query(ClubFollowerRow).filter(ClubFollowerRow.club_id == club_id).delete()
            session.delete(row)
            return True

    # ── Club followers ───────────────────────────────────────────────────

    def list_club_followers(self, club_id: int) -> list[ClubFollower]:
        with self._session() as session:
            rows = session.scalars(
                select(ClubFollowerRow)
                .where(ClubFollowerRow.club_id == club_id)
                .order_by(ClubFollowerRow.id)
            )
            return [_follower(row) for row in rows]

    def list_club_followers_by_user(self, user_id: int) -> list[ClubFollower]:
        with self._session() as session:
            rows = session.scalars(
                select(ClubFollowerRow)
                .where(ClubFollowerRow.user_id == user_id)
                .order_by(ClubFollowerRow.id)
            )
            return [_follower(row) for row in rows]

    def follow_club(self, club_id: int, user_id: int) -> ClubFollower:
        with self._session() as session:
            row = session.scalars(
                select(ClubFollowerRow).where(
                    ClubFollowerRow.club_id == club_id, ClubFollowerRow.user_id == user_id
                )
            ).first()
            if row is None:
                row = ClubFollowerRow(club_id=club_id, user_id=user_id)
                session.add(row)
                session.flush()
            return _follower(row)

    def unfollow_club(self, club_id: int, user_id: int) -> bool:
        with self._session() as session:
            deleted = (
                session.query(ClubFollowerRow)
                .filter(ClubFollowerRow.club_id == club_id, ClubFollowerRow.user_id == user_id)
                .delete()
            )
            return deleted > 0
