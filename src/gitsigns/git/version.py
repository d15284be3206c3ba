"""Version gate for choosing between git command-line flag variants."""

from __future__ import annotations

from gitsigns.exceptions import VersionAlreadySetError, VersionNotSetError
from gitsigns.logging import get_logger
from gitsigns.models import ToolVersion

__all__ = ["VersionGate"]

logger = get_logger(__name__)


class VersionGate:
    """Holds the detected git version and answers minimum-version queries.

    The version is written once, normally by
    :meth:`gitsigns.git.GitClient.detect_version` at startup, and is
    read-only afterwards. Asking for a gated decision before that is a usage
    error and raises :class:`VersionNotSetError` rather than guessing.

    Example:
        ```python
        gate = VersionGate()
        gate.set(ToolVersion(2, 30, 1))
        gate.meets_minimum(2, 13)  # True
        ```
    """

    def __init__(self, version: ToolVersion | None = None) -> None:
        self._version = version

    @property
    def is_set(self) -> bool:
        return self._version is not None

    @property
    def version(self) -> ToolVersion:
        """The detected version.

        Raises:
            VersionNotSetError: If no version has been set yet.
        """
        if self._version is None:
            raise VersionNotSetError()
        return self._version

    def set(self, version: ToolVersion) -> None:
        """Store the version.

        Raises:
            VersionAlreadySetError: If a version was already stored.
        """
        if self._version is not None:
            raise VersionAlreadySetError(
                f"git version is already set to {self._version}"
            )
        self._version = version
        logger.debug("git_version_set", version=str(version))

    def meets_minimum(
        self,
        major: int,
        minor: int | None = None,
        patch: int | None = None,
    ) -> bool:
        """Return True if the stored version is at least the given one.

        Only the supplied components are compared, most significant first;
        the first unequal component decides.

        Raises:
            VersionNotSetError: If no version has been set yet.
            ValueError: If ``patch`` is given without ``minor``.
        """
        if patch is not None and minor is None:
            raise ValueError("patch requires minor to be specified")
        required = tuple(c for c in (major, minor, patch) if c is not None)
        return self.version.as_tuple()[: len(required)] >= required
