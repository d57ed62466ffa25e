# Import all models for Tortoise ORM registration
from .photo import Photo

__all__ = ["Photo"]
