"""Codecs turning configuration values into text and back.

A codec is anything with ``encode(value) -> str`` and ``decode(text) -> value``.
Format codecs (:class:`JsonCodec`, :class:`YamlCodec`) work on plain data such
as dicts and lists.  :class:`DataclassCodec` binds a dataclass type on top of a
format codec so the locator hands out typed values.
"""
from __future__ import annotations

import dataclasses
import json
import types
import typing
from io import StringIO
from pathlib import PurePosixPath
from typing import Any, Dict, Generic, Mapping, Protocol, Type, TypeVar, Union

from ruamel.yaml import YAML, YAMLError

from .errors import DecodeError, EncodeError

T = TypeVar("T")

_YAML_SUFFIXES = {".yml", ".yaml"}
_SCALARS = (str, int, float, bool)


class Codec(Protocol[T]):
    """Minimal protocol describing the encode/decode capability."""

    def encode(self, value: T) -> str: ...

    def decode(self, text: str) -> T: ...


class JsonCodec:
    """Pretty JSON: two-space indentation, key order kept, no trailing newline."""

    def encode(self, value: Any) -> str:
        try:
            return json.dumps(value, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"cannot encode {type(value).__name__} as JSON: {exc}") from exc

    def decode(self, text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DecodeError(f"invalid JSON: {exc}") from exc


class YamlCodec:
    """Block-style YAML through ruamel.yaml.

    Loading uses the safe loader.  Dumping goes through the round-trip
    dumper, which keeps mapping order as given.  An empty document is a
    decode failure rather than ``None``.
    """

    def encode(self, value: Any) -> str:
        yaml = YAML()
        yaml.default_flow_style = False
        yaml.indent(mapping=2, sequence=4, offset=2)
        buf = StringIO()
        try:
            yaml.dump(value, buf)
        except YAMLError as exc:
            raise EncodeError(f"cannot encode {type(value).__name__} as YAML: {exc}") from exc
        return buf.getvalue()

    def decode(self, text: str) -> Any:
        try:
            data = YAML(typ="safe", pure=True).load(text)
        except YAMLError as exc:
            raise DecodeError(f"invalid YAML: {exc}") from exc
        if data is None:
            raise DecodeError("empty YAML document")
        return data


class DataclassCodec(Generic[T]):
    """Bind a dataclass type to a format codec.

    Decoding requires a mapping.  Unknown keys are ignored and fields without
    a default are required.  Field values are checked against their
    annotations: scalars (``str``, ``int``, ``float``, ``bool``), ``Optional``
    and other unions, ``List``/``Tuple``/``Dict`` containers and nested
    dataclasses, which decode recursively wherever they appear.  Other
    annotations pass values through unchecked.

    Field annotations are resolved here, so a config type with an unresolvable
    forward reference fails with ``TypeError`` at construction.
    """

    def __init__(self, config_type: Type[T], inner: Codec[Any] | None = None) -> None:
        if not (isinstance(config_type, type) and dataclasses.is_dataclass(config_type)):
            raise TypeError(f"{config_type!r} is not a dataclass type")
        self.config_type = config_type
        self.inner: Codec[Any] = inner or JsonCodec()
        self._hints: Dict[type, Dict[str, Any]] = {}
        _resolve_hints(config_type, self._hints)

    def encode(self, value: T) -> str:
        if not isinstance(value, self.config_type):
            raise EncodeError(
                f"expected {self.config_type.__name__}, got {type(value).__name__}"
            )
        return self.inner.encode(dataclasses.asdict(value))

    def decode(self, text: str) -> T:
        return _build(self.config_type, self.inner.decode(text), self._hints)


def _is_dataclass_type(hint: Any) -> bool:
    return isinstance(hint, type) and dataclasses.is_dataclass(hint)


def _resolve_hints(config_type: type, cache: Dict[type, Dict[str, Any]]) -> None:
    if config_type in cache:
        return
    try:
        hints = typing.get_type_hints(config_type)
    except (NameError, TypeError) as exc:
        raise TypeError(
            f"cannot resolve field types of {config_type.__name__}: {exc}"
        ) from exc
    cache[config_type] = hints
    for hint in hints.values():
        _collect_nested(hint, cache)


def _collect_nested(hint: Any, cache: Dict[type, Dict[str, Any]]) -> None:
    if _is_dataclass_type(hint):
        _resolve_hints(hint, cache)
    for arg in typing.get_args(hint):
        _collect_nested(arg, cache)


def _build(
    config_type: Type[T],
    data: Any,
    hints: Dict[type, Dict[str, Any]],
    where: str | None = None,
) -> T:
    where = where or config_type.__name__
    if not isinstance(data, Mapping):
        raise DecodeError(f"{where}: expected a mapping, got {type(data).__name__}")
    field_hints = hints[config_type]
    kwargs: Dict[str, Any] = {}
    for field in dataclasses.fields(config_type):
        if not field.init:
            continue
        if field.name not in data:
            if (
                field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING
            ):
                raise DecodeError(f"{where}: missing field '{field.name}'")
            continue
        kwargs[field.name] = _coerce(
            f"{where}.{field.name}", field_hints.get(field.name), data[field.name], hints
        )
    return config_type(**kwargs)


def _coerce(where: str, hint: Any, value: Any, hints: Dict[type, Dict[str, Any]]) -> Any:
    if hint is None or hint is Any:
        return value
    if hint is type(None):
        if value is not None:
            raise DecodeError(f"{where}: expected null, got {type(value).__name__}")
        return None
    if _is_dataclass_type(hint):
        return _build(hint, value, hints, where)

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin is Union or origin is types.UnionType:
        if value is None and type(None) in args:
            return None
        for arg in args:
            if arg is type(None):
                continue
            try:
                return _coerce(where, arg, value, hints)
            except DecodeError:
                continue
        raise DecodeError(f"{where}: {type(value).__name__} does not match {hint}")
    if origin is list or hint is list:
        if not isinstance(value, list):
            raise DecodeError(f"{where}: expected a list, got {type(value).__name__}")
        if not args:
            return value
        return [_coerce(f"{where}[{i}]", args[0], item, hints) for i, item in enumerate(value)]
    if origin is tuple or hint is tuple:
        if not isinstance(value, (list, tuple)):
            raise DecodeError(f"{where}: expected a list, got {type(value).__name__}")
        if not args:
            return tuple(value)
        if len(args) == 2 and args[1] is Ellipsis:
            item_hints = [args[0]] * len(value)
        elif len(args) != len(value):
            raise DecodeError(f"{where}: expected {len(args)} items, got {len(value)}")
        else:
            item_hints = list(args)
        return tuple(
            _coerce(f"{where}[{i}]", h, item, hints)
            for i, (h, item) in enumerate(zip(item_hints, value))
        )
    if origin is dict or hint is dict:
        if not isinstance(value, Mapping):
            raise DecodeError(f"{where}: expected a mapping, got {type(value).__name__}")
        if not args:
            return dict(value)
        key_hint, value_hint = args
        return {
            _coerce(f"{where} key", key_hint, k, hints): _coerce(
                f"{where}[{k!r}]", value_hint, v, hints
            )
            for k, v in value.items()
        }
    if hint in _SCALARS:
        # bool is an int subclass; "age: true" is not an age
        ok = isinstance(value, hint) and not (hint is not bool and isinstance(value, bool))
        if hint is float and isinstance(value, int) and not isinstance(value, bool):
            ok = True
            value = float(value)
        if not ok:
            raise DecodeError(f"{where}: expected {hint.__name__}, got {type(value).__name__}")
    return value


def codec_for(filename: str) -> Codec[Any]:
    """Return the format codec matching *filename*'s suffix (JSON unless YAML)."""
    if PurePosixPath(filename).suffix.lower() in _YAML_SUFFIXES:
        return YamlCodec()
    return JsonCodec()


def typed_codec(config_type: type | None, inner: Codec[Any]) -> Codec[Any]:
    """Wrap *inner* in a :class:`DataclassCodec` when *config_type* is a dataclass."""
    if config_type is not None and dataclasses.is_dataclass(config_type):
        return DataclassCodec(config_type, inner)
    return inner
