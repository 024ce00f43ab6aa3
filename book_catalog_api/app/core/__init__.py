"""Configuration, logging, exceptions and SQLite helpers."""
