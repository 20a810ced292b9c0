"""Turn GitHub trigger events into validated agent prompts."""

__version__ = "1.0.0"
