"""
Resolving who is using the app.
"""

from abc import ABC, abstractmethod
from typing import Optional

import streamlit as st

SESSION_USER_KEY = "user_id"


class IdentityResolver(ABC):
    @abstractmethod
    def current_identity(self) -> Optional[str]:
        """Return the signed-in user's id, or None."""


class SessionIdentity(IdentityResolver):
    """Identity kept in the Streamlit session state of the current browser tab."""

    def current_identity(self) -> Optional[str]:
        return st.session_state.get(SESSION_USER_KEY)

    def sign_in(self, user_id: str) -> None:
        st.session_state[SESSION_USER_KEY] = user_id

    def sign_out(self) -> None:
        st.session_state.pop(SESSION_USER_KEY, None)


class StaticIdentity(IdentityResolver):
    """Fixed identity, for scripts and tests."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id

    def current_identity(self) -> Optional[str]:
        return self.user_id

    def switch(self, user_id: Optional[str]) -> None:
        self.user_id = user_id
