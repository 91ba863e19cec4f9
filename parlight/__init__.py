"""Single-fixture DMX controller for the ParLight B262 LED par."""

__version__ = "0.1.0"
