"""Core infrastructure: configuration, database, exceptions."""
