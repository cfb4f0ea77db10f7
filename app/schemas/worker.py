"""Pydantic schemas for workers, including the role-dependent NIN rule."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.models.enums import GenderEnum, KinRelationshipEnum, WorkerRoleEnum
from app.schemas.farm import FarmRead, OptionalText

ROLES_REQUIRING_NIN = frozenset(
	{
		WorkerRoleEnum.caretaker,
		WorkerRoleEnum.manager,
		WorkerRoleEnum.assistant_manager,
		WorkerRoleEnum.accountant,
	}
)

NIN_REQUIRED_MESSAGE = (
	"NIN is required for Caretaker, Manager, Assistant Manager, and Accountant roles"
)


def nin_required_for(role: WorkerRoleEnum) -> bool:
	return role in ROLES_REQUIRING_NIN


class _WorkerFields(BaseModel):
	full_name: str = Field(min_length=2, max_length=255)
	# role must be declared before nin so the nin validator can see it
	role: WorkerRoleEnum = WorkerRoleEnum.worker
	gender: GenderEnum
	age: int = Field(ge=1, le=120)
	contact_phone: OptionalText = Field(default=None, max_length=32)
	nin: OptionalText = Field(default=None, max_length=32, validate_default=True)
	next_of_kin_name: str = Field(min_length=2, max_length=255)
	next_of_kin_relationship: KinRelationshipEnum
	next_of_kin_phone: str = Field(min_length=10, max_length=32)

	@field_validator("nin")
	@classmethod
	def check_nin_for_role(cls, value: str | None, info: ValidationInfo) -> str | None:
		role = info.data.get("role")
		if role is not None and nin_required_for(role) and not value:
			raise ValueError(NIN_REQUIRED_MESSAGE)
		return value


class WorkerCreate(_WorkerFields):
	pass


class WorkerUpdate(_WorkerFields):
	"""Full replacement of the editable worker fields, as the edit form submits."""

	is_active: bool = True


class WorkerRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	farm_id: uuid.UUID
	manager_id: uuid.UUID
	user_id: uuid.UUID | None = None
	full_name: str
	role: WorkerRoleEnum
	gender: GenderEnum
	age: int
	contact_phone: str | None = None
	nin: str | None = None
	next_of_kin_name: str
	next_of_kin_relationship: KinRelationshipEnum
	next_of_kin_phone: str
	username: str
	is_active: bool
	created_at: datetime
	updated_at: datetime


class WorkerCredentials(BaseModel):
	username: str
	password: str


class WorkerCreated(BaseModel):
	"""Creation response; ``credentials.password`` is never retrievable again."""

	worker: WorkerRead
	credentials: WorkerCredentials


class WorkerListRead(BaseModel):
	items: list[WorkerRead]


class CoworkerRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	full_name: str
	role: WorkerRoleEnum
	contact_phone: str | None = None


class WorkerProfileRead(BaseModel):
	worker: WorkerRead
	farm: FarmRead
	coworkers: list[CoworkerRead] = Field(default_factory=list)
