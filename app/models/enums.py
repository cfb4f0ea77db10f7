"""PostgreSQL-backed enum types for all ORM models.

Each StrEnum maps 1:1 to a PostgreSQL CREATE TYPE ... AS ENUM.
These are separate from the Pydantic StrEnum in app/config.py —
config enums validate settings, ORM enums type database columns.
"""

from enum import StrEnum

# ── Farm enums ──────────────────────────────────────────────────────────────


class FarmTypeEnum(StrEnum):
    """Poultry production system run on a farm."""

    layers = "layers"
    broilers = "broilers"
    dual_purpose = "dual_purpose"


# ── Worker enums ────────────────────────────────────────────────────────────


class WorkerRoleEnum(StrEnum):
    """Staff roles a farm owner can assign."""

    worker = "worker"
    caretaker = "caretaker"
    manager = "manager"
    assistant_manager = "assistant_manager"
    accountant = "accountant"


class GenderEnum(StrEnum):
    male = "male"
    female = "female"
    other = "other"


class KinRelationshipEnum(StrEnum):
    """Relationship of a worker's next of kin."""

    parent = "parent"
    sibling = "sibling"
    spouse = "spouse"
    child = "child"
    relative = "relative"
    friend = "friend"


# ── Auth enums ──────────────────────────────────────────────────────────────


class UserRoleEnum(StrEnum):
    """Identity account kinds."""

    owner = "owner"
    worker = "worker"
