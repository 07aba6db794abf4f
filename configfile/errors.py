"""Exception hierarchy for the config file locator.

Only :class:`NotFoundError` and :class:`NoDefaultProvidedError` reach callers
of :meth:`configfile.locator.ConfigFile.load`.  :class:`DecodeError` and
:class:`EncodeError` are raised by codecs and absorbed by the locator, which
falls back to the configured default instead.
"""
from __future__ import annotations

from typing import List, Sequence


class ConfigFileError(Exception):
    """Base type for every error raised by ``configfile``."""


class NotFoundError(ConfigFileError):
    """No candidate directory holds the file and creation is not allowed."""

    def __init__(self, filename: str, searched: Sequence[str]) -> None:
        self.filename = filename
        self.searched: List[str] = list(searched)
        super().__init__(
            f"Could not find '{filename}'. Searched:\n"
            + "\n".join(f"  - {s}" for s in self.searched)
        )


class NoDefaultProvidedError(ConfigFileError):
    """The file is missing or invalid and there is no default to fall back on."""

    def __init__(self, path: str | None) -> None:
        self.path = path
        super().__init__(f"No default config was provided for {path or 'unresolved path'}")


class DecodeError(ConfigFileError):
    """Text could not be decoded into the expected configuration shape."""


class EncodeError(ConfigFileError):
    """A configuration value could not be encoded to text."""
