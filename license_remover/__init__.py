"""Remove free licenses from a Steam account without tripping its rate limit."""

__version__ = "0.1.0"
