"""Premium-leave schedule parsing and retirement-urgency classification."""

__version__ = "0.1.0"
