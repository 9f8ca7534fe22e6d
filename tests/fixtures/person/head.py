Head = {"extends": "Person.Tail", "fields": ["id"]}
