# Schemas package (re-export feature modules for stable imports)
from .auth.auth import *
from .academy.track import *
from .academy.course import *
from .academy.learner import *
from .billing.invoice import *
from .common.common import *
