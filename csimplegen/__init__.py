"""Build-time compiler for csimple expressions embedded in route sources."""

__version__ = "0.1.0"
