from decimal import Decimal

from sqlmodel import Session, select, func

from .....db.models import Course, Invoice, Learner
from .....application.ports.stats_repo import StatsRepository, DashboardStats


class SqlStatsRepository(StatsRepository):
    def __init__(self, session: Session):
        self.session = session

    def dashboard_stats(self) -> DashboardStats:
        total_learners = self.session.exec(select(func.count(Learner.id))).one()
        total_revenue = self.session.exec(
            select(func.coalesce(func.sum(Invoice.amount), 0)).where(Invoice.status == "paid")
        ).one()
        active_courses = self.session.exec(
            select(func.count(Course.id)).where(Course.status == "active")
        ).one()
        pending_invoices = self.session.exec(
            select(func.count(Invoice.id)).where(Invoice.status == "pending")
        ).one()
        return DashboardStats(
            total_learners=int(total_learners or 0),
            total_revenue=Decimal(str(total_revenue or 0)),
            active_courses=int(active_courses or 0),
            pending_invoices=int(pending_invoices or 0),
        )
