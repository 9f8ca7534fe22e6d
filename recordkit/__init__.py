"""Declarative record types with typed fields, validation rules and dirty tracking."""

from .dependencies import deps_required

__author__ = "Daniel T. Afolayan (ti-oluwa@github)"

deps_required(
    {
        "typing_extensions": "typing-extensions",
        "attrs": "attrs",
        "cattrs": "cattrs",
        "dateutil": "python-dateutil",
        "orjson": "orjson",
    }
)
