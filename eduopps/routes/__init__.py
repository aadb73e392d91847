from . import interests, opportunities, preferences

__all__ = ["interests", "opportunities", "preferences"]
