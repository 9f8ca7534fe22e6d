"""Default `recordkit` settings. Override with the module named by `RECORDKIT_SETTINGS_MODULE`."""

import typing

DEFAULT_ID_PROPERTY: str = "id"
"""Name of the identity field of record types that declare none."""

MODULE_PATHS: typing.Dict[str, str] = {}
"""
Maps dotted record-name prefixes to the Python packages holding their declarations.

E.g `{"Person": "app.person"}` resolves `Person.Troll` to `app.person.troll.Troll`.
"""

DATE_TIMESTAMP_UNIT: typing.Literal["s", "ms"] = "s"
"""Unit of numeric timestamps coerced into `date` fields without a `date_format`."""
