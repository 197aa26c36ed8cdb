"""
iBuddy Backend — Document Keys
================================

What:  The one place that knows how store keys are spelled.
How:   A key is a kind plus an opaque id. Serialized, it is `<Kind>#<id>`:

           User#jane.doe@example.com    users.id, passwords.user_id
           Mentee#<uuid>                mentees.pk (and sk of the mentee row)
           Note#<uuid>                  mentees.sk of a note row

       These formats are shared with existing data and must not change.
"""

from dataclasses import dataclass
from enum import Enum

SEPARATOR = "#"


class KeyKind(str, Enum):
    USER = "User"
    MENTEE = "Mentee"
    NOTE = "Note"

    @property
    def prefix(self) -> str:
        """Leading part shared by every key of this kind, e.g. 'Note#'."""
        return f"{self.value}{SEPARATOR}"


@dataclass(frozen=True)
class Key:
    kind: KeyKind
    id: str

    def serialize(self) -> str:
        return f"{self.kind.prefix}{self.id}"

    def __str__(self) -> str:
        return self.serialize()

    @classmethod
    def parse(cls, raw: str) -> "Key":
        """
        Inverse of serialize().

        Raises ValueError for strings without a known kind or with an empty id.
        """
        kind_name, sep, ident = raw.partition(SEPARATOR)
        if not sep or not ident:
            raise ValueError(f"Malformed key: {raw!r}")
        try:
            kind = KeyKind(kind_name)
        except ValueError:
            raise ValueError(f"Unknown key kind in {raw!r}") from None
        return cls(kind, ident)


def user_key(email: str) -> Key:
    # user ids are always derived from the lowercased email
    return Key(KeyKind.USER, email.lower())


def user_id_for_email(email: str) -> str:
    return user_key(email).serialize()


def mentee_key(mentee_id: str) -> Key:
    return Key(KeyKind.MENTEE, mentee_id)


def note_key(note_id: str) -> Key:
    return Key(KeyKind.NOTE, note_id)


def is_user_id(value: object) -> bool:
    return isinstance(value, str) and value.startswith(KeyKind.USER.prefix)
