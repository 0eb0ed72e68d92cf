"""Unit tests for field normalization rules."""

from __future__ import annotations

from transforms.field_normalization import (
    clean_key,
    clean_text,
    normalize_country,
    normalize_gender,
    normalize_maintenance_flag,
    normalize_marital_status,
    normalize_product_line,
    strip_demographic_key_tag,
)


def test_clean_text_removes_padding_and_line_breaks() -> None:
    """Free text should lose surrounding whitespace and embedded line feeds."""
    cleaned = clean_text("  Hu\r\nang \n")

    assert cleaned == "Huang"


def test_clean_key_treats_blank_as_missing() -> None:
    """Whitespace-only keys should count as null."""
    assert clean_key("   ") is None


def test_normalize_marital_status_maps_codes() -> None:
    """Marital status codes should map onto the closed vocabulary."""
    statuses = [normalize_marital_status(code) for code in ("M", " s ", "m", "X", None)]

    assert statuses == ["Married", "Single", "Married", "Unknown", "Unknown"]


def test_normalize_gender_maps_codes_and_words() -> None:
    """Gender codes and words should map onto the closed vocabulary."""
    genders = [normalize_gender(code) for code in ("F", "female", " M\r\n", "Male", "")]

    assert genders == ["Female", "Female", "Male", "Male", "Unknown"]


def test_normalize_product_line_maps_unknown_to_other() -> None:
    """Unmapped product line codes should become Other."""
    lines = [normalize_product_line(code) for code in ("M", "r ", "T", "S", None)]

    assert lines == ["Mountain", "Road", "Touring", "Other", "Other"]


def test_normalize_maintenance_flag_accepts_boolean_like_values() -> None:
    """Boolean-like maintenance flags should collapse to Yes, No, or Unknown."""
    flags = ["yes", "Y", "1", "TRUE", "no", "n", "0", "false", "maybe", None]

    normalized = [normalize_maintenance_flag(flag) for flag in flags]

    assert normalized == ["Yes"] * 4 + ["No"] * 4 + ["Unknown"] * 2


def test_normalize_country_expands_iso_codes() -> None:
    """Known ISO codes should expand and blank countries become Unknown."""
    countries = [normalize_country(value) for value in ("DE", " usa ", "US", "Australia", "  ")]

    assert countries == ["Germany", "United States", "United States", "Australia", "Unknown"]


def test_strip_demographic_key_tag_removes_leading_tag() -> None:
    """Keys starting with the tag should lose their first three characters."""
    assert strip_demographic_key_tag("NASAW00011000") == "AW00011000"


def test_strip_demographic_key_tag_handles_trailing_tag() -> None:
    """Keys ending with the tag should also lose their first three characters."""
    assert strip_demographic_key_tag("AB-123-NAS") == "123-NAS"


def test_strip_demographic_key_tag_keeps_untagged_keys() -> None:
    """Untagged keys should only be cleaned."""
    assert strip_demographic_key_tag(" AW00011002 ") == "AW00011002"


def test_strip_demographic_key_tag_drops_tag_only_keys() -> None:
    """A key consisting only of the tag should become null."""
    assert strip_demographic_key_tag("NAS") is None


def test_strip_demographic_key_tag_trims_remaining_key() -> None:
    """Whitespace exposed by stripping the tag should be removed."""
    assert strip_demographic_key_tag("NAS AW0001") == "AW0001"
