"""
Movie night operations: accounts, groups, proposals, ratings and the weekly pick.

Writes require a signed-in user and raise AuthorizationError otherwise.
Reads return an empty result for anonymous callers instead of failing.
Movies proposed to a group are only visible to its members; movies with no
group are visible to everyone.
"""

import logging
from datetime import datetime, timezone

from errors import (
    AuthorizationError,
    MembershipError,
    NotFoundError,
    PreconditionError,
    UniquenessViolation
)
from group_schedule import next_movie_night, validate_schedule
from movie_models import Group, GroupMember, Movie, User
from pick_scoring import select_best_pick
from utils import (
    GROUP_MEMBERS,
    GROUPS,
    MIN_RATING,
    MAX_RATING,
    MOVIES,
    ONE_OFF,
    USERS,
    is_valid_rating
)

logger = logging.getLogger(__name__)


def utc_now():
    return datetime.now(timezone.utc)


def _require_rating(name, value):
    if not is_valid_rating(value):
        raise PreconditionError(
            f"{name} must be between {MIN_RATING} and {MAX_RATING}, got {value!r}"
        )


class MovieNight:
    """
    Application service over a document store and an identity resolver.

    Args:
        store: DocumentStore holding users, groups and movies
        identity: IdentityResolver for the current caller
        clock: Callable returning the current datetime
    """

    def __init__(self, store, identity, clock=None):
        self.store = store
        self.identity = identity
        self.clock = clock or utc_now

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def find_user(self, field, value):
        """Case-insensitive lookup of a user by username or email."""
        wanted = value.strip().casefold()
        for document in self.store.query(USERS):
            if str(document.get(field, "")).casefold() == wanted:
                return User.from_document(document)
        return None

    def get_user(self, user_id):
        document = self.store.get(USERS, user_id)
        return User.from_document(document) if document else None

    def sign_up(self, username, email, name=None):
        username = (username or "").strip()
        email = (email or "").strip()
        if not username:
            raise PreconditionError("Username is required")
        if "@" not in email:
            raise PreconditionError(f"'{email}' is not a valid email address")

        if self.find_user("username", username):
            logger.warning("Sign up rejected, username %s taken", username)
            raise UniquenessViolation("username", username)
        if self.find_user("email", email):
            logger.warning("Sign up rejected, email %s taken", email)
            raise UniquenessViolation("email", email)

        document = {
            "username": username,
            "email": email,
            "name": (name or "").strip() or username,
            "created_at": self.clock(),
        }
        user_id = self.store.insert(USERS, document)
        logger.info("Created user %s (%s)", username, user_id)
        return User(id=user_id, **document)

    def sign_in(self, username):
        """Return the user with this username, creating one on first visit."""
        username = (username or "").strip()
        if not username:
            raise PreconditionError("Username is required")

        user = self.find_user("username", username)
        if user is None:
            user = self.sign_up(username, f"{username}@example.com")
        return user

    def current_user(self):
        user_id = self.identity.current_identity()
        if not user_id:
            return None
        return self.get_user(user_id)

    def _require_identity(self, action):
        user_id = self.identity.current_identity()
        if not user_id:
            logger.warning("Anonymous caller tried to %s", action)
            raise AuthorizationError(action)
        return user_id

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def _memberships(self, group_id):
        """Members of a group in the order they joined."""
        documents = self.store.query(
            GROUP_MEMBERS, field="group_id", value=group_id, order_by="joined_at"
        )
        return [GroupMember.from_document(d) for d in documents]

    def _group_ids_for(self, user_id):
        return {
            str(d["group_id"])
            for d in self.store.query(GROUP_MEMBERS, field="user_id", value=user_id)
        }

    def _is_member(self, group_id, user_id):
        return group_id in self._group_ids_for(user_id)

    def _load_group(self, group_id):
        document = self.store.get(GROUPS, group_id)
        if document is None:
            raise NotFoundError(GROUPS, group_id)
        return Group.from_document(document)

    def _require_member(self, group_id, user_id):
        group = self._load_group(group_id)
        if not self._is_member(group_id, user_id):
            logger.warning("User %s is not in group %s", user_id, group_id)
            raise MembershipError(group_id)
        return group

    def _add_membership(self, group_id, user_id):
        self.store.insert(GROUP_MEMBERS, {
            "group_id": group_id,
            "user_id": user_id,
            "joined_at": self.clock(),
        })

    def create_group(self, name, schedule_type, schedule_time, schedule_day=None,
                     schedule_date=None, member_usernames=()):
        """
        Create a group with the caller as its first member.

        Args:
            name: Group name
            schedule_type: "recurring" (weekly) or "oneoff"
            schedule_time: HH:MM
            schedule_day: 0 (Sunday) to 6 (Saturday), for weekly groups
            schedule_date: datetime, for one-off nights
            member_usernames: Other users to add straight away

        Returns:
            The new Group
        """
        user_id = self._require_identity("create a group")
        name = (name or "").strip()
        if not name:
            raise PreconditionError("Group name is required")
        validate_schedule(schedule_type, schedule_time, schedule_day, schedule_date)

        # Resolve everyone before writing anything
        members = [user_id]
        for username in member_usernames:
            user = self.find_user("username", username)
            if user is None:
                raise NotFoundError(USERS, username)
            if user.id not in members:
                members.append(user.id)

        document = {
            "name": name,
            "schedule_type": schedule_type,
            "schedule_time": schedule_time,
            "schedule_day": schedule_day,
            "schedule_date": schedule_date if schedule_type == ONE_OFF else None,
            "current_proposer_index": 0,
            "last_movie_night": None,
        }
        group_id = self.store.insert(GROUPS, document)
        for member_id in members:
            self._add_membership(group_id, member_id)
        logger.info("User %s created group %r (%s) with %d members", user_id, name, group_id, len(members))
        return Group(id=group_id, **document)

    def add_member(self, group_id, username):
        """Add an existing user to a group the caller belongs to."""
        user_id = self._require_identity("add a group member")
        self._require_member(group_id, user_id)

        user = self.find_user("username", username)
        if user is None:
            raise NotFoundError(USERS, username)
        if not self._is_member(group_id, user.id):
            self._add_membership(group_id, user.id)
            logger.info("User %s added %s to group %s", user_id, user.id, group_id)
        return user

    def update_schedule(self, group_id, schedule_type, schedule_time, schedule_day=None,
                        schedule_date=None):
        user_id = self._require_identity("schedule a movie night")
        self._require_member(group_id, user_id)
        validate_schedule(schedule_type, schedule_time, schedule_day, schedule_date)

        updated = self.store.patch(GROUPS, group_id, {
            "schedule_type": schedule_type,
            "schedule_time": schedule_time,
            "schedule_day": schedule_day,
            "schedule_date": schedule_date if schedule_type == ONE_OFF else None,
        })
        return Group.from_document(updated)

    def get_group(self, group_id):
        user_id = self.identity.current_identity()
        if not user_id or not self._is_member(group_id, user_id):
            return None
        document = self.store.get(GROUPS, group_id)
        return Group.from_document(document) if document else None

    def list_groups(self):
        user_id = self.identity.current_identity()
        if not user_id:
            return []
        groups = []
        for group_id in sorted(self._group_ids_for(user_id)):
            document = self.store.get(GROUPS, group_id)
            if document:
                groups.append(Group.from_document(document))
        return sorted(groups, key=lambda g: g.name.casefold())

    def group_members(self, group_id):
        """Users in a group, in rotation order. Empty for non-members."""
        if self.get_group(group_id) is None:
            return []
        users = (self.get_user(m.user_id) for m in self._memberships(group_id))
        return [user for user in users if user is not None]

    def current_proposer(self, group_id):
        """Whose turn it is to propose movies for the group."""
        group = self.get_group(group_id)
        if group is None:
            return None
        members = self.group_members(group_id)
        if not members:
            return None
        return members[group.current_proposer_index % len(members)]

    def get_next_movie_night(self, group_id):
        """
        Returns:
            (datetime, proposer User) for the group's next night, or None
        """
        group = self.get_group(group_id)
        if group is None:
            return None
        return next_movie_night(group, self.clock()), self.current_proposer(group_id)

    def _rotate_proposer(self, group_id, watched_at):
        group = self._load_group(group_id)
        member_count = len(self._memberships(group_id))
        if member_count == 0:
            return
        next_index = (group.current_proposer_index + 1) % member_count
        self.store.patch(GROUPS, group_id, {
            "current_proposer_index": next_index,
            "last_movie_night": watched_at,
        })
        logger.info("Group %s proposer rotated to position %d", group_id, next_index)

    # ------------------------------------------------------------------
    # Movies
    # ------------------------------------------------------------------

    def _load_movie(self, movie_id):
        document = self.store.get(MOVIES, movie_id)
        if document is None:
            raise NotFoundError(MOVIES, movie_id)
        return Movie.from_document(document)

    def propose_movie(self, title, proposal_intent, group_id=None):
        user_id = self._require_identity("propose a movie")
        title = (title or "").strip()
        if not title:
            raise PreconditionError("Movie title is required")
        _require_rating("proposal_intent", proposal_intent)
        if group_id is not None:
            self._require_member(group_id, user_id)

        document = {
            "title": title,
            "proposer_id": user_id,
            "proposal_intent": proposal_intent,
            "interest_score": None,
            "proposed_at": self.clock(),
            "watched": False,
            "watched_at": None,
            "notes": None,
            "personal_rating": None,
            "group_id": group_id,
        }
        movie_id = self.store.insert(MOVIES, document)
        logger.info("User %s proposed %r (%s)", user_id, title, movie_id)
        return Movie(id=movie_id, **document)

    def rate_movie(self, movie_id, interest_score):
        """Record another member's interest in a proposal. Rating again replaces the old score."""
        user_id = self._require_identity("rate a movie")
        _require_rating("interest_score", interest_score)

        movie = self._load_movie(movie_id)
        if movie.group_id:
            self._require_member(movie.group_id, user_id)
        if movie.watched:
            raise PreconditionError(f"'{movie.title}' has already been watched")
        if movie.proposer_id == user_id:
            raise PreconditionError("You can't rate a movie you proposed")

        updated = self.store.patch(MOVIES, movie_id, {"interest_score": interest_score})
        logger.info("User %s rated %s with %d", user_id, movie_id, interest_score)
        return Movie.from_document(updated)

    def mark_watched(self, movie_id, notes=None, personal_rating=None):
        """
        Close out a movie. For a group movie the turn to propose passes to
        the next member.
        """
        user_id = self._require_identity("mark a movie as watched")
        if personal_rating is not None:
            _require_rating("personal_rating", personal_rating)

        movie = self._load_movie(movie_id)
        if movie.group_id:
            self._require_member(movie.group_id, user_id)
        if movie.watched:
            raise PreconditionError(f"'{movie.title}' is already marked as watched")

        updates = {
            "watched": True,
            "watched_at": self.clock(),
            "notes": (notes or "").strip() or None,
            "personal_rating": personal_rating,
        }
        updated = self.store.patch(MOVIES, movie_id, updates)
        logger.info("User %s marked %s as watched", user_id, movie_id)

        if movie.group_id:
            self._rotate_proposer(movie.group_id, updates["watched_at"])
        return Movie.from_document(updated)

    def get_movie(self, movie_id):
        user_id = self.identity.current_identity()
        if not user_id:
            return None
        document = self.store.get(MOVIES, movie_id)
        if document is None:
            return None
        movie = Movie.from_document(document)
        if movie.group_id and not self._is_member(movie.group_id, user_id):
            return None
        return movie

    def _movies(self, watched, group_id=None, descending=True):
        user_id = self.identity.current_identity()
        if not user_id:
            return []
        group_ids = self._group_ids_for(user_id)
        if group_id is not None and group_id not in group_ids:
            return []

        documents = self.store.query(
            MOVIES, field="watched", value=watched, order_by="proposed_at", descending=descending
        )
        movies = [Movie.from_document(d) for d in documents]
        if group_id is not None:
            return [m for m in movies if m.group_id == group_id]
        return [m for m in movies if m.group_id is None or m.group_id in group_ids]

    def list_movies(self, group_id=None):
        """Unwatched movies the caller can see, newest proposal first."""
        return self._movies(False, group_id)

    def list_watched(self, group_id=None):
        return self._movies(True, group_id)

    def get_weekly_pick(self, group_id=None):
        """
        The movie to watch this week.

        Candidates are scanned oldest proposal first, so among equal scores
        the movie that has been waiting longest wins.
        """
        return select_best_pick(self._movies(False, group_id, descending=False))
