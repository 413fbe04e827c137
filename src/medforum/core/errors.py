"""Error taxonomy shared by the forum services.

Services raise these to their immediate caller; the HTTP layer maps them to
status codes in ``medforum.main``.
"""


class ForumError(RuntimeError):
    """Base exception for every failure raised by the forum core."""


class NotFoundError(ForumError):
    """Target post, comment or user does not exist or is already deleted."""


class ForbiddenError(ForumError):
    """A lifecycle policy check failed (locked post, banned user, not a moderator)."""


class ConflictError(ForumError):
    """The store rejected a vote upsert on its uniqueness constraint.

    Safe to retry once with fresh state.
    """


class DataIntegrityError(ForumError):
    """Stored data violates a structural invariant (parent cycle, ambiguous vote)."""


class InvalidParentError(ForumError):
    """A reply names a parent comment that belongs to a different post."""
