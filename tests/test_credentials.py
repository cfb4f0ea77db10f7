from __future__ import annotations

import re

import pytest

from app.services.credentials import (
    farm_abbreviation,
    first_name_token,
    generate_credentials,
    generate_password,
    generate_username,
    smallest_free_suffix,
    used_suffixes,
    username_prefix,
)


def test_first_username_for_new_prefix() -> None:
    assert generate_username("John Okello", "Green Valley", []) == "john_gre001"


def test_username_shape() -> None:
    username = generate_username("Mary Nakato", "Sunrise Poultry", ["mary_sun001"])
    assert re.fullmatch(r"^[a-z]+_[a-z]{0,3}\d{3,}$", username)
    assert username == "mary_sun002"


def test_smallest_free_suffix_fills_gaps_left_by_deleted_workers() -> None:
    existing = ["john_gre001", "john_gre003"]
    assert generate_username("John Kato", "Green Valley", existing) == "john_gre002"


def test_suffix_grows_past_three_digits() -> None:
    existing = [f"ann_hil{n:03d}" for n in range(1, 1000)]
    assert generate_username("Ann", "Hilltop", existing) == "ann_hil1000"


def test_used_suffixes_ignores_other_prefixes_and_non_numeric_tails() -> None:
    existing = [
        "john_gre001",
        "john_gre002x",
        "john_green001",
        "johnny_gre004",
        "john_gre000",
        "mary_gre005",
    ]
    assert used_suffixes("john_gre", existing) == {1}


def test_used_suffixes_escapes_regex_metacharacters() -> None:
    assert used_suffixes("a.b_far", ["axb_far001", "a.b_far002"]) == {2}


def test_smallest_free_suffix() -> None:
    assert smallest_free_suffix(set()) == 1
    assert smallest_free_suffix({1, 2, 4}) == 3
    assert smallest_free_suffix({2, 3}) == 1


def test_farm_abbreviation_keeps_letters_only() -> None:
    assert farm_abbreviation("Green Valley") == "gre"
    assert farm_abbreviation("4-H Farm") == "hfa"
    assert farm_abbreviation("Ox") == "ox"
    assert farm_abbreviation("123") == ""


def test_prefix_uses_lowercased_first_word() -> None:
    assert first_name_token("  JOHN   Paul Okello ") == "john"
    assert username_prefix("JOHN Okello", "Green Valley") == "john_gre"


def test_blank_full_name_is_rejected() -> None:
    with pytest.raises(ValueError):
        generate_username("   ", "Green Valley", [])


def test_password_is_first_name_plus_six_digits() -> None:
    for _ in range(50):
        password = generate_password("John Okello")
        assert re.fullmatch(r"^john\d{6}$", password)
        assert 100000 <= int(password[4:]) <= 999999


def test_generate_credentials_pairs_username_and_password() -> None:
    credentials = generate_credentials("Grace Auma", "Green Valley", ["grace_gre001"])
    assert credentials.username == "grace_gre002"
    assert credentials.password.startswith("grace")
