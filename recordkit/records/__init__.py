"""
Declarative record types.

Declare record types with typed fields, validation rules and single-parent
inheritance, then create records whose values are coerced to their field types,
checked against the rules, and tracked for modification.

Example:
```python
from recordkit.records import declare, create

declare(
    "Person.Troll",
    fields=[
        {"name": "id", "type": "int"},
        {"name": "createdAt", "type": "date"},
        {"name": "name", "type": "string"},
        {"name": "login", "type": "string"},
    ],
    validations=[
        {"type": "presence", "field": "login"},
        {"type": "length", "field": "login", "min": 6, "max": 32},
    ],
)
troll = create("Person.Troll", {"id": "0", "login": "billgates"})
assert troll.get_id() == 0
assert troll.is_valid()
```
"""

from .coercers import FieldType, coerce  # noqa
from .declarations import RecordDeclaration, load_declaration  # noqa
from .exceptions import *  # noqa
from .fields import FieldDescriptor, define_fields, empty, load_field  # noqa
from .loader import ClassLoader  # noqa
from .record import Record  # noqa
from .registry import (  # noqa
    RecordRegistry,
    RecordType,
    create,
    declare,
    default_registry,
    lookup,
    require,
)
from .serializers import dumps, serialize  # noqa
from .validators import Rule, evaluate, load_rule  # noqa
