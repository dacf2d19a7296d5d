"""Domain entities - objects with identity."""

from .card import Card
from .subject import Subject

__all__ = ["Card", "Subject"]
