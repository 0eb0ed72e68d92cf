"""Field normalization transform.

This module maps raw coded and free-text values onto closed canonical
vocabularies. Every function is total: unexpected input resolves to an
explicit sentinel member instead of raising or passing the raw code on.
"""

from __future__ import annotations

from typing import Mapping

from core.constants import DEMOGRAPHIC_KEY_TAG, DEMOGRAPHIC_KEY_TAG_WIDTH
from core.types import Gender, MaintenanceFlag, MaritalStatus, ProductLine

_LINE_BREAK_TRANSLATION = str.maketrans("", "", "\r\n")

MARITAL_STATUS_CODES: Mapping[str, MaritalStatus] = {
    "S": "Single",
    "M": "Married",
}
GENDER_CODES: Mapping[str, Gender] = {
    "F": "Female",
    "FEMALE": "Female",
    "M": "Male",
    "MALE": "Male",
}
PRODUCT_LINE_CODES: Mapping[str, ProductLine] = {
    "M": "Mountain",
    "R": "Road",
    "T": "Touring",
}
MAINTENANCE_FLAG_CODES: Mapping[str, MaintenanceFlag] = {
    "YES": "Yes",
    "Y": "Yes",
    "1": "Yes",
    "TRUE": "Yes",
    "NO": "No",
    "N": "No",
    "0": "No",
    "FALSE": "No",
}
COUNTRY_CODES: Mapping[str, str] = {
    "DE": "Germany",
    "US": "United States",
    "USA": "United States",
}
UNKNOWN_COUNTRY = "Unknown"


def clean_text(value: str | None) -> str | None:
    """Trim whitespace and drop embedded line feeds and carriage returns.

    Args:
        value: Raw free-text value.

    Returns:
        Cleaned text, or None when the input is None.
    """
    if value is None:
        return None
    return value.strip().translate(_LINE_BREAK_TRANSLATION).strip()


def clean_key(value: str | None) -> str | None:
    """Clean a text natural key; blank keys count as missing."""
    cleaned = clean_text(value)
    return cleaned or None


def normalize_marital_status(value: str | None) -> MaritalStatus:
    """Map a marital status code to Single, Married, or Unknown."""
    return MARITAL_STATUS_CODES.get(_code_of(value), "Unknown")


def normalize_gender(value: str | None) -> Gender:
    """Map a gender code or word to Female, Male, or Unknown."""
    return GENDER_CODES.get(_code_of(value), "Unknown")


def normalize_product_line(value: str | None) -> ProductLine:
    """Map a product line code to its description, Other when unmapped."""
    return PRODUCT_LINE_CODES.get(_code_of(value), "Other")


def normalize_maintenance_flag(value: str | None) -> MaintenanceFlag:
    """Map a boolean-ish maintenance flag to Yes, No, or Unknown."""
    return MAINTENANCE_FLAG_CODES.get(_code_of(value), "Unknown")


def normalize_country(value: str | None) -> str:
    """Clean a country value and expand known ISO codes.

    Args:
        value: Raw country text or code.

    Returns:
        Country name, or ``Unknown`` when blank.
    """
    cleaned = clean_text(value)
    if not cleaned:
        return UNKNOWN_COUNTRY
    return COUNTRY_CODES.get(cleaned.upper(), cleaned)


def strip_demographic_key_tag(value: str | None) -> str | None:
    """Rewrite a demographic customer id carrying the source-system tag.

    Keys carrying the tag marker at either end lose their first
    ``DEMOGRAPHIC_KEY_TAG_WIDTH`` characters and are cleaned again; other
    keys are only cleaned.

    Args:
        value: Raw demographic key.

    Returns:
        Canonical customer id, or None when the key is blank.
    """
    cleaned = clean_key(value)
    if cleaned is None:
        return None
    marker = DEMOGRAPHIC_KEY_TAG
    if cleaned.upper().startswith(marker) or cleaned.upper().endswith(marker):
        return clean_key(cleaned[DEMOGRAPHIC_KEY_TAG_WIDTH:])
    return cleaned


def _code_of(value: str | None) -> str:
    """Build the comparison form of a coded value."""
    cleaned = clean_text(value)
    if cleaned is None:
        return ""
    return "".join(cleaned.split()).upper()
