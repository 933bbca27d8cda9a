"""Core building blocks: settings, snapshot types, errors and time helpers."""

__all__ = [
    'config',
    'custom_types',
    'errors',
    'timeutils',
]
