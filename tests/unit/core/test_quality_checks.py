"""Unit tests for raw profiling and silver verification checks."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal

from core.quality_checks import (
    profile_raw_batch,
    render_raw_batch_profile,
    verify_silver_output,
)
from core.types import CustomerProfile, Product, RawCustomerProfile, SalesLine

_LOADED_AT = datetime(2025, 11, 1, tzinfo=timezone.utc)


def _raw_profile(cst_id, firstname="Jon", gender="M"):
    return RawCustomerProfile(
        cst_id=cst_id,
        cst_key="AW00011000",
        cst_firstname=firstname,
        cst_lastname="Yang",
        cst_marital_status="S",
        cst_gndr=gender,
        cst_create_date=date(2025, 1, 1),
    )


def _silver_profile(cst_id, gender="Male", firstname="Jon"):
    return CustomerProfile(
        cst_id=cst_id,
        cst_key="AW00011000",
        cst_firstname=firstname,
        cst_lastname="Yang",
        cst_marital_status="Single",
        cst_gndr=gender,
        cst_create_date=date(2025, 1, 1),
        dwh_date_loaded=_LOADED_AT,
    )


def _silver_product(prd_id, start, end):
    return Product(
        prd_id=prd_id,
        prd_key="AC-HE-HL-U509-R",
        cat_id="AC_HE",
        prd_key_clean="HL-U509-R",
        prd_nm="Sport-100 Helmet",
        prd_cost=Decimal("12.00"),
        prd_line="S",
        prd_line_desc="Other",
        prd_start_dt=start,
        prd_end_dt=end,
        dwh_date_loaded=_LOADED_AT,
    )


def _statuses(results) -> dict[str, str]:
    return {row.check_id: row.status for row in results}


def test_profile_raw_batch_counts_key_issues() -> None:
    """Profiles should count null and duplicated natural keys."""
    records = [_raw_profile(1), _raw_profile(1), _raw_profile(None), _raw_profile(2)]

    profile = profile_raw_batch("customer_profile", records)

    assert (profile.null_keys, profile.duplicate_records, profile.unique_keys) == (1, 1, 2)


def test_profile_raw_batch_scores_quality() -> None:
    """The quality score should exclude rows with key problems."""
    records = [_raw_profile(1), _raw_profile(1), _raw_profile(None), _raw_profile(2)]

    profile = profile_raw_batch("customer_profile", records)

    assert profile.quality_score_pct == 50.0


def test_profile_raw_batch_counts_whitespace_issues() -> None:
    """Padded text values should be reported per field."""
    records = [_raw_profile(1, firstname=" Jon "), _raw_profile(2, firstname="Eu\ngene")]

    profile = profile_raw_batch("customer_profile", records)

    assert profile.whitespace_issues == {"cst_firstname": 2}


def test_profile_raw_batch_reports_coded_value_distribution() -> None:
    """Coded fields should report raw value counts."""
    records = [_raw_profile(1, gender="M"), _raw_profile(2, gender="F"), _raw_profile(3)]

    profile = profile_raw_batch("customer_profile", records)

    assert profile.coded_values["cst_gndr"] == {"M": 2, "F": 1}


def test_render_raw_batch_profile_includes_score() -> None:
    """Rendered profiles should include the quality score line."""
    profile = profile_raw_batch("customer_profile", [_raw_profile(1)])

    rendered = render_raw_batch_profile(profile)

    assert "quality_score_pct=100.00" in rendered


def test_verify_silver_output_passes_clean_profiles() -> None:
    """Clean, unique, canonical records should pass every check."""
    records = [_silver_profile(1), _silver_profile(2, gender="Female")]

    results = verify_silver_output("customer_profile", records)

    assert all(row.status == "passed" for row in results)


def test_verify_silver_output_flags_duplicate_keys() -> None:
    """Duplicated natural keys should fail the uniqueness check."""
    records = [_silver_profile(1), _silver_profile(1)]

    results = verify_silver_output("customer_profile", records)

    assert _statuses(results)["S001"] == "failed"


def test_verify_silver_output_flags_non_canonical_codes() -> None:
    """Raw codes leaking into coded fields should fail vocabulary closure."""
    records = [replace(_silver_profile(1), cst_gndr="M")]

    results = verify_silver_output("customer_profile", records)

    assert _statuses(results)["S002"] == "failed"


def test_verify_silver_output_flags_padded_text() -> None:
    """Padded text should fail the clean strings check."""
    records = [_silver_profile(1, firstname=" Jon")]

    results = verify_silver_output("customer_profile", records)

    assert _statuses(results)["S003"] == "failed"


def test_verify_silver_output_flags_negative_sales_price() -> None:
    """Negative unit prices should fail the sales consistency check."""
    record = SalesLine(
        sls_ord_num="SO1",
        sls_prd_key="BK-1",
        sls_cust_id=11000,
        sls_order_dt=None,
        sls_ship_dt=None,
        sls_due_dt=None,
        sls_sales=Decimal("10.00"),
        sls_quantity=1,
        sls_price=Decimal("-10.00"),
        dwh_date_loaded=_LOADED_AT,
    )

    results = verify_silver_output("sales_line", [record])

    assert _statuses(results)["S004"] == "failed"


def test_verify_silver_output_accepts_contiguous_history() -> None:
    """Contiguous product versions should pass the temporal check."""
    records = [
        _silver_product(212, date(2011, 7, 1), date(2012, 6, 30)),
        _silver_product(213, date(2012, 7, 1), None),
    ]

    results = verify_silver_output("product", records)

    assert _statuses(results)["S005"] == "passed"


def test_verify_silver_output_flags_overlapping_history() -> None:
    """Overlapping product versions should fail the temporal check."""
    records = [
        _silver_product(212, date(2011, 7, 1), date(2012, 12, 31)),
        _silver_product(213, date(2012, 7, 1), None),
    ]

    results = verify_silver_output("product", records)

    assert _statuses(results)["S005"] == "failed"
