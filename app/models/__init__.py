"""ORM model registry — importing this module registers every table on Base.metadata.

Alembic ``env.py`` imports ``Base`` from here (not from ``base.py``) so that
autogenerate sees all farm and record tables.  ``User`` lives in
``app.auth.models``, which imports this package, so it is not re-exported
here; ``env.py`` imports it separately.  Application code can also do::

    from app.models import Farm, Worker, EggProduction, ...
"""

# ── Base & Mixins ───────────────────────────────────────────────────────────
from app.models.base import (
    Base,
    DailyRecordMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)

# ── Enums ───────────────────────────────────────────────────────────────────
from app.models.enums import (
    FarmTypeEnum,
    GenderEnum,
    KinRelationshipEnum,
    UserRoleEnum,
    WorkerRoleEnum,
)

# ── Farm & staff models ─────────────────────────────────────────────────────
from app.models.farm import Farm, Worker

# ── Daily record models ─────────────────────────────────────────────────────
from app.models.records import (
    EggProduction,
    FeedUsage,
    Mortality,
    Vaccination,
    WorkerNote,
)

__all__ = [
    # Base & mixins
    "Base",
    "DailyRecordMixin",
    # Daily records
    "EggProduction",
    # Core
    "Farm",
    # Enums
    "FarmTypeEnum",
    "FeedUsage",
    "GenderEnum",
    "KinRelationshipEnum",
    "Mortality",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "UserRoleEnum",
    "Vaccination",
    "Worker",
    "WorkerNote",
    "WorkerRoleEnum",
]
