Broken = {"extends": "Person.Missing", "fields": ["id"]}
