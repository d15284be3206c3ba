from __future__ import annotations

from typing import Any

from gitsigns.exceptions.base import GitSignsError


class ConfigError(GitSignsError):
    """Settings could not be read or did not validate.

    Covers a missing ``--config`` file, YAML that does not parse or is not
    a mapping, and values pydantic rejects (an unknown diff algorithm, a
    ``git_version`` that is neither ``auto`` nor ``X.Y.Z``).

    Attributes:
        message: Human-readable error message.
        field: Setting name at fault, e.g. ``"diff_algorithm"``, when known.
        value: The rejected input, when known.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
