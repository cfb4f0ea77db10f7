"""Pydantic schemas for sign-up, sign-in, tokens and account settings."""

from __future__ import annotations

import uuid

from pydantic import AliasChoices, BaseModel, Field, model_validator

from app.models.enums import UserRoleEnum, WorkerRoleEnum

PASSWORD_MIN_LENGTH = 6


class SignUpRequest(BaseModel):
	email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
	password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)
	full_name: str = Field(min_length=2, max_length=255)
	phone: str | None = Field(default=None, max_length=32)


class SignInRequest(BaseModel):
	"""Email for owners, auto-generated username for workers."""

	identifier: str = Field(
		min_length=1,
		max_length=320,
		validation_alias=AliasChoices("identifier", "email", "username"),
	)
	password: str = Field(min_length=1, max_length=128)


class RefreshRequest(BaseModel):
	refresh_token: str = Field(min_length=1)


class TokenPair(BaseModel):
	access_token: str
	refresh_token: str
	token_type: str = "bearer"


class SessionRead(BaseModel):
	"""Who is signed in.

	Owners carry ``email``; workers carry ``username``, ``worker_role`` and
	``farm_id`` (the fields the worker dashboard needs).
	"""

	kind: UserRoleEnum
	id: uuid.UUID
	full_name: str | None = None
	email: str | None = None
	username: str | None = None
	worker_role: WorkerRoleEnum | None = None
	farm_id: uuid.UUID | None = None


class SignInResponse(BaseModel):
	session: SessionRead
	tokens: TokenPair


class ProfileUpdate(BaseModel):
	full_name: str | None = Field(default=None, min_length=2, max_length=255)
	new_password: str | None = Field(default=None, max_length=128)
	confirm_password: str | None = Field(default=None, max_length=128)

	@model_validator(mode="after")
	def check_password_change(self) -> ProfileUpdate:
		if not self.new_password:
			return self
		if self.new_password != self.confirm_password:
			raise ValueError("Passwords do not match")
		if len(self.new_password) < PASSWORD_MIN_LENGTH:
			raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
		return self


class ProfileUpdateResult(BaseModel):
	session: SessionRead
	changed: bool
	reauthentication_required: bool = False
