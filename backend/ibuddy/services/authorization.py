"""
iBuddy Backend — Authorization Rules
======================================

What:  Pure functions deciding whether a user may delete a user, or mutate
       a mentee or a note.
How:   No I/O here. Rules that depend on stored data (a target's mentee and
       asset counts) take those counts as arguments; UserService gathers
       them before calling in.
Result: a Decision. A denial is a value carrying the reason shown to the
        user, never an exception.
"""

from dataclasses import dataclass

from ibuddy.models.user import Role
from ibuddy.schemas.mentee import Note
from ibuddy.schemas.user import User

CANNOT_DELETE_SELF = "You can not delete yourself"
CANNOT_DELETE_ADMIN = "You can not delete an admin"
CANNOT_DELETE_EQUAL_OR_HIGHER = "You can only delete users with a lower role than you"
CANNOT_DELETE_WITH_MENTEES = "You can not delete a user with active mentees"
CANNOT_DELETE_WITH_ASSETS = "You can not delete a user who has assets"


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization rule: allowed, or denied with a reason."""

    allowed: bool
    reason: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


def can_user_delete_user(
    actor: User,
    target: User,
    mentee_count: int,
    asset_count: int,
) -> Decision:
    """
    Evaluate the deletion rules in order; the first one violated wins.

    1. nobody deletes themselves
    2. nobody deletes a holder of the top role
    3. the actor must outrank the target
    4. the target must have no mentees assigned
    5. the target must own no assets
    """
    if actor.id == target.id:
        return Decision.deny(CANNOT_DELETE_SELF)
    if target.role == Role.top():
        return Decision.deny(CANNOT_DELETE_ADMIN)
    if not actor.role > target.role:
        return Decision.deny(CANNOT_DELETE_EQUAL_OR_HIGHER)
    if mentee_count > 0:
        return Decision.deny(CANNOT_DELETE_WITH_MENTEES)
    if asset_count > 0:
        return Decision.deny(CANNOT_DELETE_WITH_ASSETS)
    return Decision.allow()


def can_user_mutate_mentee(user: User) -> bool:
    # buddies only read mentee records; callers let them act on their own mentees
    return user.role != Role.BUDDY


def can_user_mutate_note(user: User, note: Note) -> bool:
    return user.id == note.author_id or user.role > Role.BUDDY
