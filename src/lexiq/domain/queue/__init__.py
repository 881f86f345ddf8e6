# Domain Queue Package
from .models import MasteryInfo, QueueAnalysis, QueueItem

__all__ = ["MasteryInfo", "QueueItem", "QueueAnalysis"]
