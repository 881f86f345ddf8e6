# Domain Memory Package
from .models import DEFAULT_PARAMETERS, Card, CardState, FsrsParameters, Rating

__all__ = ["Card", "CardState", "Rating", "FsrsParameters", "DEFAULT_PARAMETERS"]
