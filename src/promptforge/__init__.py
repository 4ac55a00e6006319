"""Template-driven prompt assembly and multi-provider generation gateway."""

__version__ = "0.1.0"
