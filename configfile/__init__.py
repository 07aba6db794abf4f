"""Configuration file locator.

This package finds a configuration file by name across an ordered list of
candidate directories, decodes it into a typed value, and falls back to a
caller-supplied default when the file is missing or invalid.  The default
can be written back to disk so the next run finds it.
"""

from .codec import Codec, DataclassCodec, JsonCodec, YamlCodec, codec_for
from .errors import (
    ConfigFileError,
    DecodeError,
    EncodeError,
    NoDefaultProvidedError,
    NotFoundError,
)
from .locator import ConfigFile, ConfigFileBuilder, LoadResult, load_config

__all__ = [
    "Codec",
    "ConfigFile",
    "ConfigFileBuilder",
    "ConfigFileError",
    "DataclassCodec",
    "DecodeError",
    "EncodeError",
    "JsonCodec",
    "LoadResult",
    "NoDefaultProvidedError",
    "NotFoundError",
    "YamlCodec",
    "codec_for",
    "load_config",
]
__version__ = "0.1.0"
