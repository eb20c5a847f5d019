"""Core domain: enums, models, interfaces, errors."""
