"""Record type declarations loaded by name in tests, under the "Person" prefix."""
