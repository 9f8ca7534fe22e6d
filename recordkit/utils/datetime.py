import typing
import datetime

from dateutil import parser as dateutil_parser


_ISO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def iso_parse(
    s: str, /, fmt: typing.Optional[typing.Union[str, typing.Iterable[str]]] = None
) -> datetime.datetime:
    """
    Parse ISO 8601 datetime string as fast as possible.

    Tries `datetime.fromisoformat` first, then `dateutil`'s strict ISO parser,
    then the given format(s), and finally `dateutil`'s lenient parser.

    Reference: https://stackoverflow.com/a/62769371

    :param s: The string to parse.
    :param fmt: A `strptime` format, or formats, to try before the lenient parser.
    :raises ValueError: If the string cannot be parsed.
    """
    try:
        return datetime.datetime.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        pass

    try:
        return dateutil_parser.isoparse(s)
    except ValueError:
        pass

    fmt = fmt or _ISO_DATE_FORMAT
    formats = [fmt] if isinstance(fmt, str) else list(fmt)
    for f in formats:
        try:
            return datetime.datetime.strptime(s, f)
        except ValueError:
            continue

    try:
        return dateutil_parser.parse(s)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Could not parse datetime string {s!r}") from exc


_TIMESTAMP_DIVISORS = {"s": 1, "ms": 1000}


def from_timestamp(
    value: typing.Union[int, float], /, unit: str = "s"
) -> datetime.datetime:
    """
    Convert a POSIX timestamp to a timezone-aware UTC datetime.

    :param value: The timestamp.
    :param unit: "s" for seconds or "ms" for milliseconds.
    :raises ValueError: If the unit is unknown or the timestamp is out of range.
    """
    try:
        divisor = _TIMESTAMP_DIVISORS[unit]
    except KeyError:
        raise ValueError(f"Unknown timestamp unit {unit!r}") from None
    try:
        return datetime.datetime.fromtimestamp(value / divisor, tz=datetime.timezone.utc)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"Timestamp {value!r} is out of range") from exc
