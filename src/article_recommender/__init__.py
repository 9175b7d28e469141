"""Rule-based article recommendations from interests and engagement."""

__version__ = "1.0.0"
