# Domain Stats Package
from .models import HeatmapValue, RetentionPoint, StreakData, StudyEfficiency

__all__ = ["StreakData", "RetentionPoint", "StudyEfficiency", "HeatmapValue"]
