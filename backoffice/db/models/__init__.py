# Models package (re-export feature modules for stable imports)
from .auth.admin import Admin
from .academy.track import Track
from .academy.course import Course
from .academy.learner import Learner
from .billing.invoice import Invoice

__all__ = [
    "Admin",
    "Track",
    "Course",
    "Learner",
    "Invoice",
]
