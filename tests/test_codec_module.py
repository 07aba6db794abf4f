from dataclasses import dataclass

import pytest

from configfile.codec import (
    DataclassCodec,
    JsonCodec,
    YamlCodec,
    codec_for,
    typed_codec,
)
from configfile.errors import DecodeError, EncodeError
from tests.models import PersonConfig, ServerConfig, TeamConfig


def test_json_encode_is_pretty_without_trailing_newline():
    text = JsonCodec().encode({"name": "Daniel", "age": 32})
    assert text == '{\n  "name": "Daniel",\n  "age": 32\n}'


def test_json_keeps_non_ascii_text():
    assert JsonCodec().encode({"city": "Zürich"}) == '{\n  "city": "Zürich"\n}'


def test_json_decode_errors():
    with pytest.raises(DecodeError):
        JsonCodec().decode('{"name": ')
    with pytest.raises(DecodeError):
        JsonCodec().decode("")


def test_json_encode_errors():
    with pytest.raises(EncodeError):
        JsonCodec().encode({"items": {1, 2}})


def test_yaml_encode_keeps_key_order_in_block_style():
    text = YamlCodec().encode({"name": "Ada", "age": 36, "tags": ["x", "y"]})
    assert text == "name: Ada\nage: 36\ntags:\n  - x\n  - y\n"


def test_yaml_decode():
    assert YamlCodec().decode("name: Ada\nage: 36\n") == {"name": "Ada", "age": 36}


@pytest.mark.parametrize("text", ["", "# only a comment\n", "key: value:", "[unclosed"])
def test_yaml_decode_errors(text):
    with pytest.raises(DecodeError):
        YamlCodec().decode(text)


def test_dataclass_codec_decodes_nested_types():
    codec = DataclassCodec(ServerConfig)
    value = codec.decode(
        '{"host": "localhost", "port": 8080, "ratio": 2,'
        ' "owner": {"name": "Daniel", "age": 32}, "extra": true}'
    )

    assert value == ServerConfig(
        host="localhost",
        port=8080,
        owner=PersonConfig(name="Daniel", age=32),
        ratio=2.0,
    )
    assert isinstance(value.ratio, float)
    assert value.tags == []


def test_dataclass_codec_encodes_in_field_order():
    codec = DataclassCodec(ServerConfig, YamlCodec())
    text = codec.encode(
        ServerConfig(host="h", port=1, owner=PersonConfig(name="n", age=2), tags=["t"])
    )
    assert text == (
        "host: h\nport: 1\nowner:\n  name: n\n  age: 2\nratio: 1.0\ntags:\n  - t\n"
    )


@pytest.mark.parametrize(
    "text",
    [
        '["Daniel", 32]',
        '{"name": "Daniel"}',
        '{"name": "Daniel", "age": true}',
        '{"name": 7, "age": 32}',
    ],
)
def test_dataclass_codec_rejects_wrong_shape(text):
    with pytest.raises(DecodeError):
        DataclassCodec(PersonConfig).decode(text)


def test_dataclass_codec_rejects_other_values():
    with pytest.raises(EncodeError):
        DataclassCodec(PersonConfig).encode({"name": "Daniel", "age": 32})


def test_dataclass_codec_requires_dataclass_type():
    with pytest.raises(TypeError):
        DataclassCodec(dict)


def test_codec_for_picks_by_suffix():
    assert isinstance(codec_for("rules.yml"), YamlCodec)
    assert isinstance(codec_for("rules.YAML"), YamlCodec)
    assert isinstance(codec_for("rules.json"), JsonCodec)
    assert isinstance(codec_for("rules"), JsonCodec)


def test_typed_codec_wraps_dataclasses_only():
    inner = JsonCodec()
    assert typed_codec(None, inner) is inner
    assert typed_codec(dict, inner) is inner
    wrapped = typed_codec(PersonConfig, inner)
    assert isinstance(wrapped, DataclassCodec)
    assert wrapped.inner is inner


def test_dataclass_codec_decodes_optional_and_list_fields():
    value = DataclassCodec(TeamConfig).decode(
        '{"lead": {"name": "A", "age": 1},'
        ' "members": [{"name": "B", "age": 2}, {"name": "C", "age": 3}],'
        ' "tags": ["core"], "limits": {"cpu": 4}, "window": [8, 18]}'
    )

    assert isinstance(value.lead, PersonConfig)
    assert value.lead == PersonConfig(name="A", age=1)
    assert all(isinstance(m, PersonConfig) for m in value.members)
    assert [m.name for m in value.members] == ["B", "C"]
    assert value.tags == ["core"]
    assert value.limits == {"cpu": 4}
    assert value.window == (8, 18)


def test_dataclass_codec_accepts_null_for_optional_field():
    value = DataclassCodec(TeamConfig, YamlCodec()).decode("lead: null\nmembers: []\n")

    assert value.lead is None
    assert value.members == []


@pytest.mark.parametrize(
    "text",
    [
        '{"lead": null, "members": [], "tags": "notalist"}',
        '{"lead": null, "members": [], "tags": ["ok", 3]}',
        '{"lead": null, "members": [{"name": "B"}]}',
        '{"lead": null, "members": {"name": "B", "age": 2}}',
        '{"lead": "A", "members": []}',
        '{"lead": null, "members": [], "limits": {"cpu": "many"}}',
        '{"lead": null, "members": [], "window": [1, 2, 3]}',
    ],
)
def test_dataclass_codec_rejects_wrong_container_contents(text):
    with pytest.raises(DecodeError):
        DataclassCodec(TeamConfig).decode(text)


@dataclass
class UnresolvableConfig:
    owner: "MissingConfig"  # noqa: F821


def test_dataclass_codec_rejects_unresolvable_annotations_at_construction():
    with pytest.raises(TypeError):
        DataclassCodec(UnresolvableConfig)
