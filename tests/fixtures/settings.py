DEFAULT_ID_PROPERTY = "pk"
MODULE_PATHS = {"Person": "tests.fixtures.person"}
DATE_TIMESTAMP_UNIT = "ms"
not_a_setting = True
