from __future__ import annotations

import logging

from .models import ClubCreate, EventCreate, UserCreate
from .repository import EventStore

logger = logging.getLogger(__name__)

_UNSPLASH = "https://images.unsplash.com/{}?auto=format&fit=crop&w=900&q=80"

SAMPLE_USER = UserCreate(
    username="alex",
    password="password123",
    name="Alex Kim",
    major="Computer Science",
    year="3rd Year",
    interests=["Technology", "Entrepreneurship", "Sports"],
)

# (event, organizer display name)
SAMPLE_EVENTS: list[tuple[EventCreate, str]] = [
    (
        EventCreate(
            title="Technology Career Fair",
            description=(
                "Connect with top tech companies recruiting UofT students for internships "
                "and full-time positions. Companies include Google, Microsoft, Amazon, "
                "and local startups."
            ),
            date="Tomorrow",
            time="2:00-5:00 PM",
            location="Myhal Centre, Main Auditorium",
            categories=["Career", "Technology", "Networking"],
            image_url=_UNSPLASH.format("photo-1521737604893-d14cc237f11d"),
            featured=True,
        ),
        "UofT Career Centre",
    ),
    (
        EventCreate(
            title="Entrepreneurship Workshop",
            description="Learn from successful founders about building startups while in university.",
            date="Friday",
            time="3:00-5:00 PM",
            location="Rotman School",
            categories=["Entrepreneurship", "Business", "Workshop"],
            image_url=_UNSPLASH.format("photo-1515169067868-5387ec356754"),
        ),
        "Entrepreneurship Association",
    ),
    (
        EventCreate(
            title="AI Research Showcase",
            description="Learn about cutting-edge AI research from UofT's top labs and professors.",
            date="Thursday",
            time="1:00-4:00 PM",
            location="Bahen Centre",
            categories=["Technology", "AI/ML", "Research"],
            image_url=_UNSPLASH.format("photo-1517048676732-d65bc937f952"),
        ),
        "AI Research Group",
    ),
    (
        EventCreate(
            title="Campus Concert Series",
            description="Live music featuring student bands and local artists at Hart House.",
            date="Saturday",
            time="7:00-10:00 PM",
            location="Hart House",
            categories=["Music", "Arts", "Social"],
            image_url=_UNSPLASH.format("photo-1511795409834-ef04bbd61622"),
        ),
        "Hart House Music Committee",
    ),
    (
        EventCreate(
            title="Cultural Festival",
            description="Celebrate diversity with food, performances, and activities from different cultures.",
            date="Next Week",
            time="12:00-6:00 PM",
            location="King's College Circle",
            categories=["Cultural", "Food", "Social"],
            image_url=_UNSPLASH.format("photo-1529156069898-49953e39b3ac"),
        ),
        "Cultural Clubs Association",
    ),
]

SAMPLE_CLUBS: list[ClubCreate] = [
    ClubCreate(
        name="Computer Science Society",
        description="Community for CS students with workshops, hackathons, and social events.",
        categories=["Technology", "Academic"],
        image_url=_UNSPLASH.format("photo-1581091226033-d5c48150dbaa"),
    ),
    ClubCreate(
        name="Entrepreneurship Association",
        description="Supporting student entrepreneurs with resources, mentorship, and pitch competitions.",
        categories=["Business", "Entrepreneurship"],
        image_url=_UNSPLASH.format("photo-1559136555-9303baea8ebd"),
    ),
    ClubCreate(
        name="AI Research Group",
        description="Student-led group exploring cutting-edge AI topics through research projects.",
        categories=["Technology", "AI/ML", "Research"],
        image_url=_UNSPLASH.format("photo-1522202176988-66273c2fd55f"),
    ),
]


def seed_sample_data(store: EventStore) -> bool:
    """
    Populate an empty store with the demo user, events and clubs.

    Returns ``False`` without touching the store if the sample user exists.
    """
    if store.get_user_by_username(SAMPLE_USER.username) is not None:
        return False

    user = store.create_user(SAMPLE_USER)
    for event, organizer in SAMPLE_EVENTS:
        store.create_event(event, organizer_id=user.id, organizer=organizer)
    for club in SAMPLE_CLUBS:
        store.create_club(club)

    logger.info(
        "Seeded sample data: 1 user, %d events, %d clubs",
        len(SAMPLE_EVENTS),
        len(SAMPLE_CLUBS),
    )
    return True
