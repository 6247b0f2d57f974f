"""Core types: errors, data model, backend interface."""
