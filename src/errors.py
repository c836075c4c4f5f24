"""
Error types raised by the movie night operations.

Every error is a local validation failure raised before any write reaches
the store, so none of them leave partial state behind.
"""


class MovieNightError(Exception):
    """Base class for all movie night errors."""


class AuthorizationError(MovieNightError):
    """A write was attempted without a signed-in user."""

    def __init__(self, action):
        self.action = action
        super().__init__(f"You must be signed in to {action}")


class UniquenessViolation(MovieNightError):
    """A username or email is already registered."""

    def __init__(self, field, value):
        self.field = field
        self.value = value
        super().__init__(f"{field.capitalize()} '{value}' is already taken")


class PreconditionError(MovieNightError):
    """Input is out of range or the movie is in the wrong state."""


class NotFoundError(MovieNightError):
    """No document exists for the given key."""

    def __init__(self, collection, key):
        self.collection = collection
        self.key = key
        super().__init__(f"No {collection} record with id '{key}'")


class MembershipError(AuthorizationError):
    """The signed-in user is not a member of the group."""

    def __init__(self, group_id):
        self.group_id = group_id
        self.action = "use this group"
        MovieNightError.__init__(self, "You are not a member of this group")
