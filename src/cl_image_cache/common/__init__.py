"""Common module - errors, settings, schemas, host protocol and base classes."""
