import datetime

import pytest

from recordkit.records import UnknownFieldError


def test_construction_coerces_values(troll_type):
    troll = troll_type.create(
        {"id": "12", "createdAt": "2012-04-05T10:30:00", "name": 42, "login": "billgates"}
    )
    assert troll.get("id") == 12
    assert troll.get("createdAt") == datetime.datetime(2012, 4, 5, 10, 30)
    assert troll.get("name") == "42"
    assert troll.get("passwordHash") is None


def test_every_field_has_a_value(troll_type):
    troll = troll_type.create()
    assert troll.get_data() == dict.fromkeys(troll_type.field_names)


def test_defaults_and_aliases(registry):
    record_type = registry.declare(
        "Point",
        fields=[
            {"name": "id", "type": "int", "alias": "ID"},
            {"name": "x", "type": "float", "default": "1.5"},
            {"name": "tags", "default": list},
        ],
    )
    first = record_type.create({"ID": "3", "id": "4"})
    second = record_type.create()

    assert first.get("id") == 3
    assert first.get("x") == 1.5
    assert first.get("tags") == [] and first.get("tags") is not second.get("tags")


def test_records_do_not_share_mutable_defaults(registry):
    record_type = registry.declare("Tagged", fields=["id", {"name": "tags", "default": []}])
    first, second = record_type.create(), record_type.create()
    first.get("tags").append("troll")
    assert second.get("tags") == []


def test_unknown_keys_are_ignored(troll_type):
    troll = troll_type.create({"login": "billgates", "email": "bill@microsoft.com"})
    assert "email" not in troll
    with pytest.raises(UnknownFieldError):
        troll.get("email")


def test_record_data_must_be_a_mapping(troll_type):
    with pytest.raises(TypeError):
        troll_type.create([("login", "billgates")])


def test_get_and_set_unknown_fields(troll_type):
    troll = troll_type.create()
    with pytest.raises(UnknownFieldError):
        troll.set("email", "bill@microsoft.com")
    with pytest.raises(KeyError):
        troll["email"]
    assert not troll.dirty


def test_int_round_trip(troll_type):
    troll = troll_type.create()
    troll.set("id", "42")
    assert troll.get("id") == 42


def test_date_round_trip(troll_type, now):
    troll = troll_type.create({"createdAt": now})
    assert troll.get("createdAt") == now

    today = datetime.date.today()
    troll.set("createdAt", today)
    assert troll.get("createdAt") == today


def test_item_access(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    troll["name"] = "Bill Gates"
    assert troll["name"] == "Bill Gates"
    assert troll.is_modified("name")


def test_constructed_records_are_clean(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    assert not troll.dirty
    assert troll.modified_fields == ()
    assert all(not troll.is_modified(name) for name in troll_type.field_names)


def test_setting_an_equal_value_is_a_no_op(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    assert troll.set("id", "0") is False
    assert troll.set("login", "billgates") is False
    assert not troll.dirty


def test_setting_a_different_value_marks_only_that_field(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    assert troll.set("login", "stevejobs") is True
    assert troll.modified_fields == ("login",)
    assert troll.get_changes() == {"login": "stevejobs"}


def test_values_of_different_types_are_different(registry):
    record_type = registry.declare("Flag", fields=["id", "value"])
    record = record_type.create({"value": 1})
    assert record.set("value", True) is True
    assert record.get("value") is True


def test_update(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    changed = troll.update({"id": 0, "name": "Bill Gates", "login": "billgates2"})
    assert changed == ("name", "login")

    with pytest.raises(UnknownFieldError):
        troll.update({"passwordHash": "x", "email": "bill@microsoft.com"})
    assert troll.get("passwordHash") is None


def test_commit_and_reject(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    troll.set("name", "Bill Gates")
    troll.commit()
    assert not troll.dirty
    assert troll.get("name") == "Bill Gates"

    troll.set("name", "Linus")
    troll.set("name", "Ken")
    troll.set("id", 3)
    assert troll.modified_fields == ("id", "name")
    troll.reject()
    assert not troll.dirty
    assert troll.get("name") == "Bill Gates"
    assert troll.get("id") == 0


def test_field_set_back_to_its_original_value_stays_modified(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    troll.set("login", "stevejobs")
    troll.set("login", "billgates")
    assert troll.is_modified("login")


def test_identity(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    assert troll.get_id() == 0
    troll.set_id("5")
    assert troll.get_id() == 5
    assert troll.is_modified("id")


def test_is_valid_is_idempotent(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    troll.set("name", "Bill Gates")
    before = (troll.get_data(), troll.modified_fields)

    assert troll.is_valid() is troll.is_valid()
    assert (troll.get_data(), troll.modified_fields) == before


def test_copy(troll_type, troll_data):
    troll = troll_type.create(troll_data)
    troll.set("name", "Bill Gates")
    duplicate = troll.copy()

    assert type(duplicate) is type(troll)
    assert duplicate.get_data() == troll.get_data()
    assert not duplicate.dirty
    duplicate.set("login", "stevejobs")
    assert troll.get("login") == "billgates"


def test_record_class_must_match_its_type(registry, troll_type):
    other_type = registry.declare("Point", fields=["id"])
    with pytest.raises(TypeError):
        troll_type.record_class(other_type)


def test_repr(troll_type):
    troll = troll_type.create({"id": 1, "login": "billgates"})
    assert repr(troll).startswith("Troll(id=1, createdAt=None, name=None, login='billgates'")
