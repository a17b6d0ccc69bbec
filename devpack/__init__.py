"""devpack — install developer tool stacks from declarative definitions."""

__version__ = "0.1.0"
