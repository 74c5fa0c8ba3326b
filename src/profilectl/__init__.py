"""profilectl — user profile updates with pluggable field validation."""

__version__ = "0.1.0"
