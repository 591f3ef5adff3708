"""Sport performance grading: scoring engine, record store and HTTP API."""
