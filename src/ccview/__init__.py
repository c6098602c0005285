"""ccview - config spec resolution for ClearCase views."""

__version__ = "0.1.0"
