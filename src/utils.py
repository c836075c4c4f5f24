"""
Utility functions and constants for the movie night app.
"""

import os
import logging

import streamlit as st
from tmdbv3api import TMDb, Movie

logger = logging.getLogger(__name__)

# Rating scale shared by proposal intent, interest score and personal rating
MIN_RATING = 1
MAX_RATING = 4

# Weekly pick scoring adjustments
PERFECT_MATCH_BONUS = 4
LOW_INTEREST_PENALTY = 8

# Collections
MOVIES = "movies"
USERS = "users"
GROUPS = "groups"
GROUP_MEMBERS = "group_members"

# Group schedules
RECURRING = "recurring"
ONE_OFF = "oneoff"
SCHEDULE_TYPES = (RECURRING, ONE_OFF)

COLLECTION_FIELDS = {
    MOVIES: [
        "id",
        "title",
        "proposer_id",
        "proposal_intent",
        "interest_score",
        "proposed_at",
        "watched",
        "watched_at",
        "notes",
        "personal_rating",
        "group_id"
    ],
    USERS: [
        "id",
        "username",
        "email",
        "name",
        "created_at"
    ],
    GROUPS: [
        "id",
        "name",
        "schedule_type",
        "schedule_day",
        "schedule_time",
        "schedule_date",
        "current_proposer_index",
        "last_movie_night"
    ],
    GROUP_MEMBERS: [
        "id",
        "group_id",
        "user_id",
        "joined_at"
    ]
}

DEFAULT_SPREADSHEET = "movie_night"
TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p/w500"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_setting(name, default=None):
    """
    Look up a runtime setting.

    Streamlit secrets win over environment variables, which win over the default.
    """
    try:
        if name in st.secrets:
            return st.secrets[name]
    except Exception:
        # No secrets.toml for this deployment
        logger.debug("Streamlit secrets unavailable, reading %s from environment", name)
    return os.environ.get(name, default)


def configure_logging():
    """Configure the root logger from the LOG_LEVEL setting."""
    level_name = str(get_setting("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT
    )


def is_valid_rating(value):
    """Whether value is an int on the 1-4 rating scale."""
    return isinstance(value, int) and not isinstance(value, bool) and MIN_RATING <= value <= MAX_RATING


@st.cache_data(show_spinner=False)
def get_movie_poster_url(movie_title):
    """
    Get movie poster URL from TMDB.

    Args:
        movie_title: Title to search for

    Returns:
        Poster URL string, or None when TMDB is not configured or has no match
    """
    api_key = get_setting("TMDB_API_KEY")
    if not api_key or not movie_title:
        return None

    try:
        tmdb = TMDb()
        tmdb.api_key = api_key
        search_results = Movie().search(movie_title)
        if search_results and getattr(search_results[0], "poster_path", None):
            return f"{TMDB_IMAGE_BASE}{search_results[0].poster_path}"
        return None
    except Exception:
        logger.exception("Poster lookup failed for %r", movie_title)
        return None
