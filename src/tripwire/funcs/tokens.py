"""Context token names shared by chain functions."""

DEEP = "deep"
EXPECTED = "expected"
OPERATOR = "operator"
PROPERTY = "property"
MATCH = "match"
