import datetime
import logging

import pytest

from recordkit.dependencies import DependencyRequired, deps_required
from recordkit.logging import log_exception, log_message
from recordkit.utils.datetime import from_timestamp, iso_parse
from recordkit.utils.misc import is_iterable, merge_mappings
from recordkit.utils.module_loading import import_string


def test_merge_mappings():
    merged = merge_mappings(
        {"a": 1, "nested": {"x": 1, "y": 2}},
        {"b": 2, "nested": {"y": 3}},
        {"a": 0},
    )
    assert merged == {"a": 0, "b": 2, "nested": {"x": 1, "y": 3}}
    assert merge_mappings({"nested": {"x": 1}}, {"nested": {"y": 2}}, merge_nested=False) == {
        "nested": {"y": 2}
    }


def test_is_iterable():
    assert is_iterable([1])
    assert is_iterable("abc")
    assert not is_iterable("abc", exclude=(str,))
    assert not is_iterable(1)


def test_import_string():
    assert import_string("datetime.timezone") is datetime.timezone
    with pytest.raises(ImportError):
        import_string("datetime")
    with pytest.raises(AttributeError):
        import_string("datetime.nothing")


def test_iso_parse():
    assert iso_parse("2012-04-05T10:30:00.123+0100") == datetime.datetime(
        2012,
        4,
        5,
        10,
        30,
        0,
        123000,
        tzinfo=datetime.timezone(datetime.timedelta(hours=1)),
    )
    assert iso_parse("05/04/2012", fmt="%d/%m/%Y") == datetime.datetime(2012, 4, 5)
    with pytest.raises(ValueError):
        iso_parse("garbage")


def test_from_timestamp():
    assert from_timestamp(0) == datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
    assert from_timestamp(1500, "ms") == datetime.datetime(
        1970, 1, 1, 0, 0, 1, 500000, tzinfo=datetime.timezone.utc
    )
    with pytest.raises(ValueError):
        from_timestamp(0, "h")
    with pytest.raises(ValueError):
        from_timestamp(1e20)


def test_log_message(caplog):
    logger = logging.getLogger("recordkit.tests")
    with caplog.at_level(logging.DEBUG, logger="recordkit.tests"):
        log_message("declared", "debug", logger)
        log_message("loaded", logging.WARNING, logger)
    assert [(record.levelname, record.message) for record in caplog.records] == [
        ("DEBUG", "declared"),
        ("WARNING", "loaded"),
    ]


def test_log_exception(caplog):
    logger = logging.getLogger("recordkit.tests")
    try:
        int("troll")
    except ValueError as exc:
        with caplog.at_level(logging.DEBUG, logger="recordkit.tests"):
            log_exception(exc, "Conversion failed", logger=logger)

    error, location = caplog.records
    assert error.levelname == "ERROR"
    assert error.message.startswith("Conversion failed: invalid literal")
    assert error.exc_info is not None
    assert location.levelname == "DEBUG"
    assert location.message.startswith("ValueError raised in test_log_exception")


def test_deps_required():
    deps_required({"orjson": "orjson"})
    with pytest.raises(DependencyRequired) as exc_info:
        deps_required({"recordkit_missing_dependency": "recordkit-missing-dependency"})
    assert exc_info.value.missing_dependencies == (
        ("recordkit_missing_dependency", "recordkit-missing-dependency"),
    )
    assert "pip install recordkit-missing-dependency" in str(exc_info.value)
