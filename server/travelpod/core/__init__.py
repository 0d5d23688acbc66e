"""Core infrastructure: configuration, database, security, errors and observability."""
