"""ID Generation.

ULID-based identifiers with type prefixes so log lines stay readable
(``chg_01HV...``, ``sess_01HV...``).
"""

from typing import NewType
from ulid import ULID

ChangeID = NewType("ChangeID", str)
"""Pending change identifier"""

SessionID = NewType("SessionID", str)
"""Render session identifier"""

GenerationID = NewType("GenerationID", str)
"""Dynamic view generation identifier"""


class Prefix:
    """ID prefix constants."""

    CHANGE = "chg"
    SESSION = "sess"
    GENERATION = "gen"


def generate(prefix: str) -> str:
    """Generate a prefixed ULID."""
    return f"{prefix}_{ULID()}"


def new_change_id() -> ChangeID:
    """Generate pending change ID."""
    return ChangeID(generate(Prefix.CHANGE))


def new_session_id() -> SessionID:
    """Generate render session ID."""
    return SessionID(generate(Prefix.SESSION))


def new_generation_id() -> GenerationID:
    """Generate generation request ID."""
    return GenerationID(generate(Prefix.GENERATION))
