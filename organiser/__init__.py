"""Interview Organiser: interview scheduling and lifecycle API."""

__version__ = "1.0.0"
