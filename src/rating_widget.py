"""
Star rating control.

Picking a star only previews the rating; nothing is saved until the user
presses the save button. Read-only mode just draws the stars.
"""

import streamlit as st

from utils import MAX_RATING

FILLED_STAR = "★"
EMPTY_STAR = "☆"


class RatingState:
    """Committed value plus an uncommitted preview for one rating control."""

    def __init__(self, value=0, max_value=MAX_RATING, read_only=False):
        self.value = value or 0
        self.max_value = max_value
        self.read_only = read_only
        self.preview = None

    def hover(self, star):
        if self.read_only:
            return
        if not 1 <= star <= self.max_value:
            raise ValueError(f"Star must be between 1 and {self.max_value}, got {star}")
        self.preview = star

    def clear_hover(self):
        self.preview = None

    def displayed_value(self):
        return self.preview if self.preview is not None else self.value

    def commit(self):
        """Save the previewed star. Returns the new value, or None if nothing was previewed."""
        if self.read_only or self.preview is None:
            return None
        self.value = self.preview
        self.preview = None
        return self.value

    def stars(self):
        shown = self.displayed_value()
        return "".join(
            FILLED_STAR if star <= shown else EMPTY_STAR
            for star in range(1, self.max_value + 1)
        )


def _state_for(key, value, max_value, read_only):
    state_key = f"rating_{key}"
    if state_key not in st.session_state:
        st.session_state[state_key] = RatingState(value, max_value, read_only)
    return st.session_state[state_key]


def render_rating(key, value=0, max_value=MAX_RATING, read_only=False, label=None):
    """
    Draw a rating control.

    Args:
        key: Unique widget key
        value: Currently saved rating (0 when unrated)
        max_value: Number of stars
        read_only: Only display the stars
        label: Optional caption above the stars

    Returns:
        The rating saved on this run, otherwise None
    """
    if label:
        st.caption(label)

    if read_only:
        st.markdown(RatingState(value, max_value, read_only=True).stars())
        return None

    state = _state_for(key, value, max_value, read_only)

    cols = st.columns(max_value + 1)
    for star in range(1, max_value + 1):
        glyph = FILLED_STAR if star <= state.displayed_value() else EMPTY_STAR
        with cols[star - 1]:
            if st.button(glyph, key=f"{key}_star_{star}"):
                state.hover(star)
                st.rerun()

    with cols[max_value]:
        if st.button("Save rating", key=f"{key}_save", disabled=state.preview is None):
            committed = state.commit()
            # Next render should start from the saved value
            st.session_state.pop(f"rating_{key}", None)
            return committed

    return None
