"""Hermie - screenshot capture and spaced-repetition review backend."""

__version__ = "0.1.0"
