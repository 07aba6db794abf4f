"""Locate a configuration file across candidate directories and load it.

A :class:`ConfigFileBuilder` collects the filename, the ordered search path,
an optional default and the create-if-missing policy, and produces an
immutable :class:`ConfigFile`.  Loading follows three outcomes:

  - found and valid: the decoded file wins, nothing is written.
  - found but invalid, or unreadable: fall back to the default and write it
    over the resolved path.
  - not found: with ``create_if_missing`` the first directory is used as the
    resolved path (so the default gets written there); otherwise the default
    is returned without being persisted, or :class:`NotFoundError` is raised
    when there is no default either.

Paths are joined as ``{directory}/{filename}`` on every platform.
"""
from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Optional, Tuple, TypeVar

from .codec import Codec, codec_for, typed_codec
from .errors import DecodeError, EncodeError, NoDefaultProvidedError, NotFoundError

T = TypeVar("T")

logger = logging.getLogger(__name__)

SOURCE_FILE = "file"
SOURCE_DEFAULT = "default"


def join_path(directory: str, filename: str) -> str:
    """Join with a literal ``/``; an empty directory means the bare filename."""
    if not directory:
        return filename
    return f"{directory}/{filename}"


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Outcome of :meth:`ConfigFile.resolve`."""

    value: T
    path: Optional[str]
    source: str
    persisted: bool = False

    @property
    def from_default(self) -> bool:
        return self.source == SOURCE_DEFAULT


@dataclass(frozen=True)
class ConfigFile(Generic[T]):
    """Immutable locator for one configuration file."""

    filename: str
    codec: Codec[T]
    directories: Tuple[str, ...] = ()
    default: Optional[T] = None
    create_if_missing: bool = False

    def resolve_path(self) -> str:
        """Return the path to read from (and write a default to).

        The first directory in which the file exists wins.  With no match the
        first directory is used when ``create_if_missing`` is set; an empty
        search path resolves to the bare filename.  Otherwise raise
        :class:`NotFoundError`.
        """
        searched: List[str] = []
        for directory in self.directories:
            candidate = join_path(directory, self.filename)
            searched.append(candidate)
            if os.path.exists(candidate):
                logger.debug("Found %s", candidate)
                return candidate

        if not self.directories:
            return self.filename
        if self.create_if_missing:
            path = join_path(self.directories[0], self.filename)
            logger.debug("No %s found; using %s for creation", self.filename, path)
            return path
        raise NotFoundError(self.filename, searched)

    def resolve(self) -> LoadResult[T]:
        """Load the configuration and report where the value came from."""
        try:
            path: Optional[str] = self.resolve_path()
        except NotFoundError:
            if self.default is None:
                raise
            logger.debug("No %s found; returning default without writing it", self.filename)
            return LoadResult(copy.deepcopy(self.default), None, SOURCE_DEFAULT)

        text = self._read(path)
        if text is not None:
            try:
                return LoadResult(self.codec.decode(text), path, SOURCE_FILE)
            except DecodeError as exc:
                logger.warning("Ignoring invalid config file %s: %s", path, exc)

        return self._from_default(path)

    def load(self) -> T:
        """Return the configuration value; see :meth:`resolve`."""
        return self.resolve().value

    def _read(self, path: str) -> Optional[str]:
        try:
            with open(path, "r", encoding="utf-8-sig") as fh:
                return fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            return None

    def _from_default(self, path: Optional[str]) -> LoadResult[T]:
        if self.default is None:
            raise NoDefaultProvidedError(path)
        persisted = False
        if path is not None:
            persisted = self._write_default(path)
        return LoadResult(copy.deepcopy(self.default), path, SOURCE_DEFAULT, persisted)

    def _write_default(self, path: str) -> bool:
        try:
            text = self.codec.encode(self.default)
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(text)
        except (EncodeError, OSError) as exc:
            logger.warning("Failed to write default config to %s: %s", path, exc)
            return False
        logger.debug("Wrote default config to %s", path)
        return True


class ConfigFileBuilder(Generic[T]):
    """Chainable builder for :class:`ConfigFile`.

    ``config_type`` binds decoded data to a dataclass; ``codec`` overrides the
    format picked from the filename suffix.
    """

    def __init__(
        self,
        filename: str,
        config_type: type | None = None,
        codec: Codec[Any] | None = None,
    ) -> None:
        if not filename:
            raise ValueError("filename must not be empty")
        self._filename = filename
        self._codec: Codec[Any] = typed_codec(config_type, codec or codec_for(filename))
        self._directories: List[str] = []
        self._default: Optional[T] = None
        self._create_if_missing = False

    def add_directory(self, directory: str) -> "ConfigFileBuilder[T]":
        self._directories.append(str(directory))
        return self

    def set_default(self, value: T) -> "ConfigFileBuilder[T]":
        self._default = value
        return self

    def enable_create_if_missing(self) -> "ConfigFileBuilder[T]":
        self._create_if_missing = True
        return self

    def build(self) -> ConfigFile[T]:
        return ConfigFile(
            filename=self._filename,
            codec=self._codec,
            directories=tuple(self._directories),
            default=copy.deepcopy(self._default),
            create_if_missing=self._create_if_missing,
        )

    def resolve(self) -> LoadResult[T]:
        return self.build().resolve()

    def load(self) -> T:
        return self.build().load()


def load_config(
    filename: str,
    directories: Iterable[str] = (),
    default: Any = None,
    create_if_missing: bool = False,
    config_type: type | None = None,
    codec: Codec[Any] | None = None,
) -> Any:
    """Locate and load *filename* in one call.

    Same semantics as :class:`ConfigFileBuilder`; see the module docstring.
    """
    builder: ConfigFileBuilder[Any] = ConfigFileBuilder(filename, config_type, codec)
    if isinstance(directories, (str, os.PathLike)):
        directories = [os.fspath(directories)]
    for directory in directories:
        builder.add_directory(directory)
    if default is not None:
        builder.set_default(default)
    if create_if_missing:
        builder.enable_create_if_missing()
    return builder.load()
