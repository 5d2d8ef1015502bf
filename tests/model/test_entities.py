"""Tests for entity models, link tables and the JSON serializer."""

from enum import Enum

import pytest
from pydantic import ValidationError

from seqapi.model import Entity, Link, RootEntity
from seqapi.serialization import decode, serialize


class Level(str, Enum):
    INFORMATION = "Information"
    ERROR = "Error"


class SignalEntity(Entity):
    title: str
    level: Level | None = None


SIGNAL_JSON = (
    b'{"Id": "signal-1", "Title": "Errors", "Level": "Error",'
    b' "Links": {"Self": "api/signals/signal-1{?version}", "Group": "api/signals/signal-1/group"}}'
)


class TestEntityDecoding:
    """Decoding server documents into entities."""

    def test_reads_pascal_case_fields(self):
        """Wire names are PascalCase, Python names snake_case."""
        root = decode(
            b'{"Product": "Seq", "Version": "2024.3", "InstanceName": "prod", "Links": {}}',
            RootEntity,
        )

        assert root.product == "Seq"
        assert root.version == "2024.3"
        assert root.instance_name == "prod"

    def test_link_table_maps_names_to_templates(self):
        """Links object becomes a name -> Link mapping."""
        signal = decode(SIGNAL_JSON, SignalEntity)

        assert set(signal.links) == {"Self", "Group"}
        assert isinstance(signal.links["Self"], Link)
        assert signal.links["Self"].get_uri() == "api/signals/signal-1{?version}"

    def test_enum_values_decode_from_strings(self):
        signal = decode(SIGNAL_JSON, SignalEntity)

        assert signal.level is Level.ERROR

    def test_missing_links_default_to_empty(self):
        entity = decode(b'{"Id": "x"}', Entity)

        assert entity.links == {}

    def test_unknown_fields_are_kept(self):
        """Newer servers may add fields; they must not break decoding."""
        entity = decode(b'{"Id": "x", "Links": {}, "Shiny": 42}', Entity)

        assert entity.model_extra == {"Shiny": 42}

    def test_entities_are_immutable(self):
        signal = decode(SIGNAL_JSON, SignalEntity)

        with pytest.raises(ValidationError):
            signal.title = "changed"

    def test_invalid_json_raises_validation_error(self):
        with pytest.raises(ValidationError):
            decode(b"<html>", SignalEntity)

    def test_decodes_lists(self):
        items = decode(b"[" + SIGNAL_JSON + b"," + SIGNAL_JSON + b"]", list[SignalEntity])

        assert len(items) == 2
        assert items[0] == items[1]

    def test_str_names_type_and_id(self):
        assert str(decode(SIGNAL_JSON, SignalEntity)) == "SignalEntity(signal-1)"
        assert str(Entity()) == "Entity"


class TestSerialization:
    """Encoding request bodies."""

    def test_writes_pascal_case_and_link_strings(self):
        """Entities round-trip in the server's wire shape."""
        signal = decode(SIGNAL_JSON, SignalEntity)

        body = decode(serialize(signal), dict)

        assert body["Id"] == "signal-1"
        assert body["Title"] == "Errors"
        assert body["Links"] == {
            "Self": "api/signals/signal-1{?version}",
            "Group": "api/signals/signal-1/group",
        }

    def test_enums_are_written_as_strings(self):
        assert serialize({"Level": Level.ERROR}) == b'{"Level":"Error"}'

    def test_model_enum_fields_are_written_as_strings(self):
        signal = SignalEntity(title="t", level=Level.INFORMATION)

        assert decode(serialize(signal), dict)["Level"] == "Information"

    def test_enums_are_written_by_value(self):
        class Priority(Enum):
            LOW = 1

        assert serialize({"Level": Level.ERROR, "Priority": Priority.LOW}) == (
            b'{"Level":"Error","Priority":1}'
        )

    def test_none_is_null(self):
        assert serialize(None) == b"null"

    def test_plain_values(self):
        assert serialize({"a": [1, 2]}) == b'{"a":[1,2]}'
        assert serialize("text") == b'"text"'
