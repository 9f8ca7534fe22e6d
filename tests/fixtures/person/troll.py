TROLL_FIELDS = [
    {"name": "id", "type": "int"},
    {"name": "createdAt", "type": "date"},
    {"name": "name", "type": "string"},
    {"name": "login", "type": "string"},
    {"name": "passwordHash", "type": "string"},
]

TROLL_VALIDATIONS = [
    {"type": "presence", "field": "login"},
    {"type": "length", "field": "name", "min": 3, "max": 100},
    {"type": "length", "field": "login", "min": 6, "max": 32},
    {"type": "format", "field": "login", "matcher": r"^[a-z0-9_.-]+$"},
]

Troll = {"fields": TROLL_FIELDS, "validations": TROLL_VALIDATIONS}
