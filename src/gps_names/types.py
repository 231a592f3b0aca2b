from __future__ import annotations

from enum import Enum


class NameType(str, Enum):
    """Which kind of name piece an engine instance is tuned for."""

    GIVEN = "given"
    SURNAME = "surname"

    @property
    def is_surname(self) -> bool:
        return self is NameType.SURNAME

    @property
    def resource_prefix(self) -> str:
        return "surname" if self is NameType.SURNAME else "givenname"

    @classmethod
    def from_flag(cls, is_surname: bool) -> "NameType":
        return cls.SURNAME if is_surname else cls.GIVEN
