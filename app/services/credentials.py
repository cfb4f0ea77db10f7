"""Worker login credential generation.

Usernames look like ``john_gre001``: the worker's first name, an underscore,
the first three letters of the farm name, then the smallest positive number
not already taken for that prefix, zero-padded to three digits.  Numbers
freed by deleted workers are reused before new ones are allocated.

Everything here is pure; callers supply the set of usernames already in use.
"""

from __future__ import annotations

import re
import secrets
from collections.abc import Iterable
from dataclasses import dataclass

FARM_ABBREVIATION_LENGTH = 3
SUFFIX_WIDTH = 3
PASSWORD_DIGITS_MIN = 100000
PASSWORD_DIGITS_MAX = 999999

_NON_LETTERS = re.compile(r"[^a-z]")


@dataclass(frozen=True, slots=True)
class Credentials:
	username: str
	password: str


def first_name_token(full_name: str) -> str:
	tokens = full_name.split()
	if not tokens:
		raise ValueError("full_name must contain at least one word")
	return tokens[0].lower()


def farm_abbreviation(farm_name: str) -> str:
	return _NON_LETTERS.sub("", farm_name.lower())[:FARM_ABBREVIATION_LENGTH]


def username_prefix(full_name: str, farm_name: str) -> str:
	return f"{first_name_token(full_name)}_{farm_abbreviation(farm_name)}"


def used_suffixes(prefix: str, existing_usernames: Iterable[str]) -> set[int]:
	"""Positive numeric suffixes already attached to ``prefix``."""
	pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
	found: set[int] = set()
	for username in existing_usernames:
		match = pattern.match(username)
		if match is None:
			continue
		value = int(match.group(1))
		if value > 0:
			found.add(value)
	return found


def smallest_free_suffix(taken: set[int]) -> int:
	candidate = 1
	while candidate in taken:
		candidate += 1
	return candidate


def generate_username(full_name: str, farm_name: str, existing_usernames: Iterable[str]) -> str:
	prefix = username_prefix(full_name, farm_name)
	suffix = smallest_free_suffix(used_suffixes(prefix, existing_usernames))
	return f"{prefix}{suffix:0{SUFFIX_WIDTH}d}"


def generate_password(full_name: str) -> str:
	span = PASSWORD_DIGITS_MAX - PASSWORD_DIGITS_MIN + 1
	digits = PASSWORD_DIGITS_MIN + secrets.randbelow(span)
	return f"{first_name_token(full_name)}{digits}"


def generate_credentials(
	full_name: str,
	farm_name: str,
	existing_usernames: Iterable[str],
) -> Credentials:
	return Credentials(
		username=generate_username(full_name, farm_name, existing_usernames),
		password=generate_password(full_name),
	)
