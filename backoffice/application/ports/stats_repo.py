from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol


@dataclass
class DashboardStats:
    total_learners: int
    total_revenue: Decimal
    active_courses: int
    pending_invoices: int


class StatsRepository(Protocol):
    def dashboard_stats(self) -> DashboardStats:
        ...
