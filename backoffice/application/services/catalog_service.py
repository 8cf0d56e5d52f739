from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..ports.repository import Repository
from ..ports.stats_repo import StatsRepository, DashboardStats
from ...exceptions import NotFound, ValidationFailed
from ...utils import ensure_utc, utcnow


@dataclass
class CatalogService:
    tracks: Repository
    courses: Repository
    learners: Repository
    invoices: Repository
    stats: StatsRepository

    # Tracks
    def list_tracks(self, search: Optional[str] = None) -> List[Any]:
        return self.tracks.list(search=search)

    def get_track(self, track_id: int) -> Any:
        return self._get_or_404(self.tracks, track_id, "Track")

    def create_track(self, data: Dict[str, Any]) -> Any:
        return self.tracks.create(data)

    def update_track(self, track_id: int, data: Dict[str, Any]) -> Any:
        return self._update_or_404(self.tracks, track_id, data, "Track")

    def delete_track(self, track_id: int) -> None:
        self._delete_or_404(self.tracks, track_id, "Track")

    # Courses
    def list_courses(self, search: Optional[str] = None, track_id: Optional[int] = None) -> List[Any]:
        return self.courses.list(search=search, track_id=track_id)

    def get_course(self, course_id: int) -> Any:
        return self._get_or_404(self.courses, course_id, "Course")

    def create_course(self, data: Dict[str, Any]) -> Any:
        self._require(self.tracks, data.get("track_id"), "Track")
        return self.courses.create(data)

    def update_course(self, course_id: int, data: Dict[str, Any]) -> Any:
        if "track_id" in data:
            self._require(self.tracks, data["track_id"], "Track")
        return self._update_or_404(self.courses, course_id, data, "Course")

    def delete_course(self, course_id: int) -> None:
        self._delete_or_404(self.courses, course_id, "Course")

    # Learners
    def list_learners(self, search: Optional[str] = None, track_id: Optional[int] = None) -> List[Any]:
        return self.learners.list(search=search, track_id=track_id)

    def get_learner(self, learner_id: int) -> Any:
        return self._get_or_404(self.learners, learner_id, "Learner")

    def create_learner(self, data: Dict[str, Any]) -> Any:
        if data.get("track_id") is not None:
            self._require(self.tracks, data["track_id"], "Track")
        self._ensure_unique_learner_email(data["email"])
        return self.learners.create(data)

    def update_learner(self, learner_id: int, data: Dict[str, Any]) -> Any:
        if data.get("track_id") is not None:
            self._require(self.tracks, data["track_id"], "Track")
        if data.get("email"):
            self._ensure_unique_learner_email(data["email"], exclude_id=learner_id)
        return self._update_or_404(self.learners, learner_id, data, "Learner")

    def delete_learner(self, learner_id: int) -> None:
        self._delete_or_404(self.learners, learner_id, "Learner")

    # Invoices
    def list_invoices(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Any]:
        return self.invoices.list(search=search, status=status)

    def get_invoice(self, invoice_id: int) -> Any:
        return self._get_or_404(self.invoices, invoice_id, "Invoice")

    def create_invoice(self, data: Dict[str, Any]) -> Any:
        self._check_invoice_refs(data, require_learner=True)
        self._normalize_dates(data)
        if data.get("status") == "paid" and not data.get("paid_date"):
            data["paid_date"] = utcnow()
        return self.invoices.create(data)

    def update_invoice(self, invoice_id: int, data: Dict[str, Any]) -> Any:
        self._check_invoice_refs(data, require_learner="learner_id" in data)
        self._normalize_dates(data)
        if data.get("status") == "paid" and not data.get("paid_date"):
            current = self._get_or_404(self.invoices, invoice_id, "Invoice")
            if current.paid_date is None:
                data["paid_date"] = utcnow()
        return self._update_or_404(self.invoices, invoice_id, data, "Invoice")

    def delete_invoice(self, invoice_id: int) -> None:
        self._delete_or_404(self.invoices, invoice_id, "Invoice")

    # Dashboard
    def dashboard_stats(self) -> DashboardStats:
        return self.stats.dashboard_stats()

    def _check_invoice_refs(self, data: Dict[str, Any], require_learner: bool) -> None:
        if require_learner:
            self._require(self.learners, data.get("learner_id"), "Learner")
        if data.get("track_id") is not None:
            self._require(self.tracks, data["track_id"], "Track")
        if data.get("course_id") is not None:
            self._require(self.courses, data["course_id"], "Course")

    @staticmethod
    def _normalize_dates(data: Dict[str, Any]) -> None:
        # Naive client timestamps are taken as UTC
        for key in ("due_date", "paid_date"):
            if data.get(key) is not None:
                data[key] = ensure_utc(data[key])

    def _ensure_unique_learner_email(self, email: str, exclude_id: Optional[int] = None) -> None:
        clashes = [l for l in self.learners.list(email=email) if l.id != exclude_id]
        if clashes:
            raise ValidationFailed("Learner with this email already exists")

    @staticmethod
    def _require(repo: Repository, entity_id: Optional[int], label: str) -> None:
        if entity_id is None or repo.get(entity_id) is None:
            raise ValidationFailed(f"{label} not found")

    @staticmethod
    def _get_or_404(repo: Repository, entity_id: int, label: str) -> Any:
        entity = repo.get(entity_id)
        if entity is None:
            raise NotFound(f"{label} not found")
        return entity

    @staticmethod
    def _update_or_404(repo: Repository, entity_id: int, data: Dict[str, Any], label: str) -> Any:
        entity = repo.update(entity_id, data)
        if entity is None:
            raise NotFound(f"{label} not found")
        return entity

    @staticmethod
    def _delete_or_404(repo: Repository, entity_id: int, label: str) -> None:
        if not repo.delete(entity_id):
            raise NotFound(f"{label} not found")
