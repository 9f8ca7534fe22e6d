import datetime
import decimal

import orjson
import pytest

from recordkit.records import SerializationError, dumps, serialize


@pytest.fixture
def troll(troll_type):
    return troll_type.create(
        {
            "id": 1,
            "createdAt": datetime.datetime(2012, 4, 5, 10, 30, tzinfo=datetime.timezone.utc),
            "name": "Steve Jobs",
            "login": "billgates",
        }
    )


def test_serialize_python(troll):
    data = serialize(troll)
    assert list(data) == ["id", "createdAt", "name", "login", "passwordHash"]
    assert data["createdAt"] == troll.get("createdAt")


def test_serialize_json(troll):
    data = serialize(troll, fmt="json")
    assert data["createdAt"] == "2012-04-05T10:30:00+00:00"
    assert data["id"] == 1


def test_serialize_include_and_exclude(troll):
    assert list(serialize(troll, include=["login", "id"])) == ["id", "login"]
    assert list(serialize(troll, exclude=["passwordHash", "createdAt"])) == [
        "id",
        "name",
        "login",
    ]


def test_serialize_unknown_fields(troll):
    with pytest.raises(SerializationError):
        serialize(troll, include=["email"])
    with pytest.raises(SerializationError):
        serialize(troll, exclude=["email"])


def test_serialize_unknown_format(troll):
    with pytest.raises(SerializationError, match="Unsupported serialization format"):
        serialize(troll, fmt="xml")


def test_serialize_by_alias(registry):
    record_type = registry.declare(
        "Point", fields=[{"name": "id", "type": "int", "alias": "ID"}, "x"]
    )
    point = record_type.create({"ID": 1, "x": 2})
    assert serialize(point, by_alias=True) == {"ID": 1, "x": 2}
    assert serialize(point) == {"id": 1, "x": 2}


def test_dumps(troll):
    assert orjson.loads(dumps(troll, exclude=["passwordHash"])) == {
        "id": 1,
        "createdAt": "2012-04-05T10:30:00+00:00",
        "name": "Steve Jobs",
        "login": "billgates",
    }


def test_dumps_converts_auto_values(registry):
    record_type = registry.declare("Order", fields=["id", "total", "tags"])
    order = record_type.create(
        {"id": 1, "total": decimal.Decimal("9.99"), "tags": ("new", datetime.date(2012, 4, 5))}
    )
    assert orjson.loads(dumps(order)) == {
        "id": 1,
        "total": "9.99",
        "tags": ["new", "2012-04-05"],
    }


def test_dumps_unencodable_values(registry):
    record_type = registry.declare("Blob", fields=["id", "payload"])
    with pytest.raises(SerializationError):
        dumps(record_type.create({"id": 1, "payload": object()}))


def test_serializers_module_is_documented():
    from recordkit.records import serializers

    assert serializers.__doc__
    assert all(fmt in serializers.__doc__ for fmt in serializers.SERIALIZATION_FORMATS)
