"""
Movie Night - propose movies, rate your friends' picks, and see what to watch this week.
"""

import streamlit as st
import sys
import os
import logging
from datetime import datetime, time as dt_time

# =============================================================================
# IMPORTS AND SETUP
# =============================================================================

# Add src directory to path for imports
current_dir = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(current_dir, 'src')

if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from errors import MovieNightError
from identity import SessionIdentity
from movie_night import MovieNight
from movie_store import InMemoryStore
from pick_scoring import score_candidate
from rating_widget import render_rating
from sheet_store import GoogleSheetStore, get_gsheet_client
from utils import (
    DEFAULT_SPREADSHEET,
    MAX_RATING,
    ONE_OFF,
    RECURRING,
    SCHEDULE_TYPES,
    configure_logging,
    get_movie_poster_url,
    get_setting
)

configure_logging()
logger = logging.getLogger("main_app")

INTENT_LABELS = {
    1: "Only if nothing else",
    2: "Could be fun",
    3: "Really want to",
    4: "Must watch!"
}

SCHEDULE_LABELS = {RECURRING: "Every week", ONE_OFF: "Once"}
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# =============================================================================
# STORE SETUP
# =============================================================================

@st.cache_resource
def get_store():
    """Use the configured spreadsheet, or an in-memory store if Sheets is unavailable."""
    client = get_gsheet_client(get_setting("gcp_service_account"))
    if client is not None:
        try:
            spreadsheet = client.open(get_setting("SPREADSHEET_NAME", DEFAULT_SPREADSHEET))
            logger.info("Using Google Sheets store")
            return GoogleSheetStore(spreadsheet)
        except Exception:
            logger.exception("Could not open spreadsheet")
    logger.warning("Falling back to in-memory store")
    return InMemoryStore()


def get_app():
    return MovieNight(get_store(), SessionIdentity())


def run_action(action, success_message=None):
    """Run a user action, reporting MovieNightError in the UI."""
    try:
        result = action()
    except MovieNightError as e:
        st.error(f"❌ {e}")
        return None
    if success_message:
        st.success(success_message)
    return result

# =============================================================================
# UI COMPONENTS
# =============================================================================

def render_sign_in(app):
    """Render username sign in and full sign up forms."""
    st.markdown("### 🎬 Welcome to Movie Night")
    sign_in_tab, sign_up_tab = st.tabs(["Sign in", "Sign up"])

    with sign_in_tab:
        with st.form("sign_in"):
            username = st.text_input("Username")
            if st.form_submit_button("Continue", type="primary"):
                user = run_action(lambda: app.sign_in(username))
                if user:
                    app.identity.sign_in(user.id)
                    st.rerun()

    with sign_up_tab:
        with st.form("sign_up"):
            username = st.text_input("Username", key="signup_username")
            email = st.text_input("Email")
            name = st.text_input("Display name (optional)")
            if st.form_submit_button("Create account", type="primary"):
                user = run_action(lambda: app.sign_up(username, email, name))
                if user:
                    app.identity.sign_in(user.id)
                    st.rerun()


def render_weekly_pick(app, group_id=None):
    """Render this week's top pick."""
    st.markdown("### 🏆 This Week's Top Pick")
    pick = app.get_weekly_pick(group_id)

    if pick is None:
        st.info("No movie picks available yet. Propose movies and rate them to get suggestions!")
        return

    poster_col, info_col = st.columns([1, 2])
    with poster_col:
        poster_url = get_movie_poster_url(pick.title)
        if poster_url:
            st.image(poster_url)
        else:
            st.markdown("🎬 No Poster")

    with info_col:
        proposer = app.get_user(pick.proposer_id)
        st.markdown(f"## {pick.title}")
        st.markdown(f"**Score:** {score_candidate(pick)}")
        render_rating(f"pick_{pick.id}", pick.interest_score, read_only=True, label="Group interest")
        if proposer:
            st.markdown(f"Proposed by **{proposer.display_name}**")


def render_propose_form(app, group_id=None):
    """Render the propose-a-movie form."""
    with st.expander("➕ Propose a movie"):
        with st.form("propose", clear_on_submit=True):
            title = st.text_input("Movie title")
            intent = st.select_slider(
                "How much do you want to watch it?",
                options=list(range(1, MAX_RATING + 1)),
                value=3,
                format_func=lambda i: f"{i} - {INTENT_LABELS[i]}"
            )
            if st.form_submit_button("Propose", type="primary"):
                run_action(
                    lambda: app.propose_movie(title, intent, group_id),
                    success_message=f"Proposed {title.strip()}"
                )


def render_movie_card(app, movie, user):
    """Render one proposed movie with its rating and watch controls."""
    proposer = app.get_user(movie.proposer_id)
    proposer_name = proposer.display_name if proposer else "Unknown"

    with st.container(border=True):
        st.markdown(f"**{movie.title}**")
        st.caption(
            f"Proposed by {proposer_name} on {movie.proposed_at:%b %d} · "
            f"intent {movie.proposal_intent}/{MAX_RATING}"
        )

        if movie.proposer_id == user.id:
            render_rating(movie.id, movie.interest_score, read_only=True, label="Interest")
        else:
            committed = render_rating(movie.id, movie.interest_score, label="Your interest")
            if committed is not None:
                if run_action(lambda: app.rate_movie(movie.id, committed)):
                    st.rerun()

        with st.popover("✅ Mark watched"):
            with st.form(f"watched_{movie.id}"):
                notes = st.text_area("Notes (optional)")
                personal_rating = st.select_slider(
                    "Your rating",
                    options=list(range(0, MAX_RATING + 1)),
                    format_func=lambda r: "★" * r if r else "Skip"
                )
                if st.form_submit_button("Save"):
                    if run_action(lambda: app.mark_watched(movie.id, notes, personal_rating or None)):
                        st.rerun()


def render_movie_list(app, user, group_id=None):
    st.markdown("### 🍿 Proposed Movies")
    movies = app.list_movies(group_id)
    if not movies:
        st.info("Nobody has proposed anything yet.")
        return
    for movie in movies:
        render_movie_card(app, movie, user)


def render_watched(app, group_id=None):
    watched = app.list_watched(group_id)
    if not watched:
        return
    with st.expander(f"📼 Watched ({len(watched)})"):
        for movie in watched:
            line = f"**{movie.title}** · watched {movie.watched_at:%b %d, %Y}"
            if movie.personal_rating:
                line += f" · {'★' * movie.personal_rating}"
            st.markdown(line)
            if movie.notes:
                st.caption(movie.notes)


def render_create_group(app):
    """Render the new group form in the sidebar."""
    with st.expander("👥 New group"):
        with st.form("create_group", clear_on_submit=True):
            name = st.text_input("Group name")
            members = st.text_input("Members (usernames, comma separated)")
            schedule_type = st.radio(
                "Meets", options=list(SCHEDULE_TYPES), format_func=lambda t: SCHEDULE_LABELS[t]
            )
            day = st.selectbox("Day", options=list(range(7)), format_func=lambda d: DAY_NAMES[d])
            date = st.date_input("Date (one-off only)")
            time = st.time_input("Time", value=dt_time(20, 0))

            if st.form_submit_button("Create", type="primary"):
                usernames = [u.strip() for u in members.split(",") if u.strip()]
                group = run_action(lambda: app.create_group(
                    name,
                    schedule_type,
                    time.strftime("%H:%M"),
                    schedule_day=day if schedule_type == RECURRING else None,
                    schedule_date=datetime.combine(date, dt_time()) if schedule_type == ONE_OFF else None,
                    member_usernames=usernames
                ))
                if group:
                    # Selected on the next run, before the picker is drawn
                    st.session_state["new_group_id"] = group.id
                    st.rerun()


def select_group(app):
    """Sidebar group picker. Returns the chosen group id, or None for everyone."""
    groups = app.list_groups()
    options = [None] + [g.id for g in groups]
    names = {g.id: g.name for g in groups}
    if "new_group_id" in st.session_state:
        st.session_state["group_id"] = st.session_state.pop("new_group_id")
    if st.session_state.get("group_id") not in options:
        st.session_state["group_id"] = None
    return st.selectbox(
        "Group",
        options=options,
        key="group_id",
        format_func=lambda group_id: names.get(group_id, "Everyone")
    )


def render_group_header(app, group_id):
    """Render the next movie night and whose turn it is to propose."""
    group = app.get_group(group_id)
    when, proposer = app.get_next_movie_night(group_id)
    st.markdown(f"## 👥 {group.name}")
    st.markdown(f"**Next movie night:** {when:%A %b %d at %H:%M}")
    if proposer:
        st.markdown(f"**Proposing this time:** {proposer.display_name}")

    with st.popover("➕ Add member"):
        with st.form(f"add_member_{group_id}", clear_on_submit=True):
            username = st.text_input("Username")
            if st.form_submit_button("Add"):
                run_action(
                    lambda: app.add_member(group_id, username),
                    success_message=f"Added {username.strip()}"
                )

# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application function."""
    st.set_page_config(
        page_title="Movie Night",
        page_icon="🎬",
        layout="wide"
    )

    app = get_app()
    user = app.current_user()

    if user is None:
        render_sign_in(app)
        return

    with st.sidebar:
        st.markdown(f"Signed in as **{user.display_name}**")
        if st.button("Sign out"):
            app.identity.sign_out()
            st.rerun()
        group_id = select_group(app)
        render_create_group(app)

    if group_id:
        render_group_header(app, group_id)
    render_weekly_pick(app, group_id)
    st.divider()
    render_propose_form(app, group_id)
    render_movie_list(app, user, group_id)
    render_watched(app, group_id)

if __name__ == "__main__":
    main()
