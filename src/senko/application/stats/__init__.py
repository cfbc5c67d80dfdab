# Application Stats Package
from .service import StatsDashboard, StatsService

__all__ = ["StatsService", "StatsDashboard"]
