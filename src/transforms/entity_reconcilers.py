"""Per-entity reconciliation rules.

This module composes survivorship, normalization, repair, and interval
rules into one pure batch transform per entity. The orchestrator looks
rules up by entity name and never touches field-level logic itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Hashable, Mapping, Sequence, cast

from core.errors import SilverlineTransformError
from core.types import (
    CustomerDemographic,
    CustomerLocation,
    CustomerProfile,
    EntityName,
    Product,
    ProductCategory,
    RawCustomerDemographic,
    RawCustomerLocation,
    RawCustomerProfile,
    RawProduct,
    RawProductCategory,
    RawRecord,
    RawSalesLine,
    SalesLine,
    SilverRecord,
)
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
from transforms.survivorship import select_survivors
from transforms.temporal_intervals import derive_validity_intervals
from transforms.value_repair import (
    default_cost,
    parse_packed_date,
    reconcile_sales_amounts,
    sanitize_birth_date,
    split_product_key,
)


@dataclass(frozen=True)
class EntityRules:
    """Reconciliation rule set of one entity.

    Attributes:
        entity: Entity identifier.
        reconcile: Batch transform from raw records to silver records.
        raw_key: Survivorship key of a raw record, None when unusable.
        natural_key: Natural key of a silver record, used for output order.
        recipe_steps: Ordered rule names recorded for lineage.
    """

    entity: EntityName
    reconcile: Callable[[Sequence[Any], datetime], list[Any]]
    raw_key: Callable[[Any], Hashable | None]
    natural_key: Callable[[Any], tuple[Any, ...]]
    recipe_steps: tuple[str, ...]


def reconcile_customer_profiles(
    records: Sequence[RawCustomerProfile],
    processed_at: datetime,
) -> list[CustomerProfile]:
    """Keep the latest profile per customer and standardize its codes."""
    survivors = select_survivors(
        records,
        key_of=_customer_profile_key,
        order_of=lambda record: record.cst_create_date,
    )
    return [
        CustomerProfile(
            cst_id=cast(int, record.cst_id),
            cst_key=clean_text(record.cst_key),
            cst_firstname=clean_text(record.cst_firstname),
            cst_lastname=clean_text(record.cst_lastname),
            cst_marital_status=normalize_marital_status(record.cst_marital_status),
            cst_gndr=normalize_gender(record.cst_gndr),
            cst_create_date=record.cst_create_date,
            dwh_date_loaded=processed_at,
        )
        for record in survivors
    ]


def reconcile_products(
    records: Sequence[RawProduct],
    processed_at: datetime,
) -> list[Product]:
    """Keep the latest row per version id and derive validity intervals.

    Duplicates collapse per ``prd_id``; the surviving versions are then
    grouped by product key so each one ends the day before its successor.
    """
    survivors = select_survivors(
        records,
        key_of=_product_key,
        order_of=lambda record: record.prd_start_dt,
    )
    intervals = derive_validity_intervals(
        survivors,
        group_of=_product_version_group,
        start_of=lambda record: record.prd_start_dt,
        end_of=lambda record: record.prd_end_dt,
    )
    products: list[Product] = []
    for record, end_date in intervals:
        prd_key = clean_key(record.prd_key)
        key_parts = split_product_key(prd_key) if prd_key is not None else None
        products.append(
            Product(
                prd_id=cast(int, record.prd_id),
                prd_key=prd_key,
                cat_id=key_parts.cat_id if key_parts else None,
                prd_key_clean=key_parts.prd_key_clean if key_parts else None,
                prd_nm=clean_text(record.prd_nm),
                prd_cost=default_cost(record.prd_cost),
                prd_line=clean_text(record.prd_line),
                prd_line_desc=normalize_product_line(record.prd_line),
                prd_start_dt=record.prd_start_dt,
                prd_end_dt=end_date,
                dwh_date_loaded=processed_at,
            )
        )
    return products


def reconcile_sales_lines(
    records: Sequence[RawSalesLine],
    processed_at: datetime,
) -> list[SalesLine]:
    """Keep the latest line per order and product, then repair amounts."""
    survivors = select_survivors(records, key_of=_sales_key, order_of=_sales_order_date)
    sales_lines: list[SalesLine] = []
    for record in survivors:
        amounts = reconcile_sales_amounts(
            record.sls_sales, record.sls_quantity, record.sls_price
        )
        ord_num, prd_key = cast(tuple[str, str], _sales_key(record))
        sales_lines.append(
            SalesLine(
                sls_ord_num=ord_num,
                sls_prd_key=prd_key,
                sls_cust_id=record.sls_cust_id,
                sls_order_dt=parse_packed_date(record.sls_order_dt),
                sls_ship_dt=parse_packed_date(record.sls_ship_dt),
                sls_due_dt=parse_packed_date(record.sls_due_dt),
                sls_sales=amounts.sales,
                sls_quantity=amounts.quantity,
                sls_price=amounts.price,
                dwh_date_loaded=processed_at,
            )
        )
    return sales_lines


def reconcile_customer_demographics(
    records: Sequence[RawCustomerDemographic],
    processed_at: datetime,
) -> list[CustomerDemographic]:
    """Strip the key tag, keep the latest birth date row, clean values."""
    survivors = select_survivors(
        records,
        key_of=_customer_demographic_key,
        order_of=lambda record: record.bdate,
    )
    return [
        CustomerDemographic(
            cid=cast(str, strip_demographic_key_tag(record.cid)),
            bdate=sanitize_birth_date(record.bdate, processed_at),
            gen=normalize_gender(record.gen),
            dwh_date_loaded=processed_at,
        )
        for record in survivors
    ]


def reconcile_customer_locations(
    records: Sequence[RawCustomerLocation],
    processed_at: datetime,
) -> list[CustomerLocation]:
    """Keep the first location per customer in input order."""
    survivors = select_survivors(records, key_of=_customer_location_key)
    return [
        CustomerLocation(
            cid=cast(str, clean_key(record.cid)),
            cntry=normalize_country(record.cntry),
            dwh_date_loaded=processed_at,
        )
        for record in survivors
    ]


def reconcile_product_categories(
    records: Sequence[RawProductCategory],
    processed_at: datetime,
) -> list[ProductCategory]:
    """Keep the first category row per id in input order."""
    survivors = select_survivors(records, key_of=_product_category_key)
    return [
        ProductCategory(
            id=cast(str, clean_key(record.id)),
            cat=clean_text(record.cat),
            subcat=clean_text(record.subcat),
            maintenance=normalize_maintenance_flag(record.maintenance),
            dwh_date_loaded=processed_at,
        )
        for record in survivors
    ]


def _customer_profile_key(record: RawCustomerProfile) -> Hashable | None:
    return record.cst_id


def _product_key(record: RawProduct) -> Hashable | None:
    return record.prd_id


def _sales_key(record: RawSalesLine) -> Hashable | None:
    ord_num = clean_key(record.sls_ord_num)
    prd_key = clean_key(record.sls_prd_key)
    if ord_num is None or prd_key is None:
        return None
    return (ord_num, prd_key)


def _customer_demographic_key(record: RawCustomerDemographic) -> Hashable | None:
    return strip_demographic_key_tag(record.cid)


def _customer_location_key(record: RawCustomerLocation) -> Hashable | None:
    return clean_key(record.cid)


def _product_category_key(record: RawProductCategory) -> Hashable | None:
    return clean_key(record.id)


def _sales_order_date(record: RawSalesLine) -> Any:
    return parse_packed_date(record.sls_order_dt)


def _product_version_group(record: RawProduct) -> Hashable:
    # Versions without a product key cannot be chained to each other.
    prd_key = clean_key(record.prd_key)
    if prd_key is None:
        return ("prd_id", record.prd_id)
    return prd_key


ENTITY_RULES: Mapping[EntityName, EntityRules] = {
    "customer_profile": EntityRules(
        entity="customer_profile",
        reconcile=reconcile_customer_profiles,
        raw_key=_customer_profile_key,
        natural_key=lambda record: (record.cst_id,),
        recipe_steps=("survivorship:cst_create_date", "field_normalization"),
    ),
    "product": EntityRules(
        entity="product",
        reconcile=reconcile_products,
        raw_key=_product_key,
        natural_key=lambda record: (record.prd_id,),
        recipe_steps=(
            "survivorship:prd_start_dt",
            "temporal_intervals:prd_key",
            "field_normalization",
            "value_repair",
        ),
    ),
    "sales_line": EntityRules(
        entity="sales_line",
        reconcile=reconcile_sales_lines,
        raw_key=_sales_key,
        natural_key=lambda record: (record.sls_ord_num, record.sls_prd_key),
        recipe_steps=("survivorship:sls_order_dt", "field_normalization", "value_repair"),
    ),
    "customer_demographic": EntityRules(
        entity="customer_demographic",
        reconcile=reconcile_customer_demographics,
        raw_key=_customer_demographic_key,
        natural_key=lambda record: (record.cid,),
        recipe_steps=("survivorship:bdate", "field_normalization", "value_repair"),
    ),
    "customer_location": EntityRules(
        entity="customer_location",
        reconcile=reconcile_customer_locations,
        raw_key=_customer_location_key,
        natural_key=lambda record: (record.cid,),
        recipe_steps=("survivorship:input_order", "field_normalization"),
    ),
    "product_category": EntityRules(
        entity="product_category",
        reconcile=reconcile_product_categories,
        raw_key=_product_category_key,
        natural_key=lambda record: (record.id,),
        recipe_steps=("survivorship:input_order", "field_normalization"),
    ),
}


def get_entity_rules(entity: str) -> EntityRules:
    """Look up the rule set of an entity.

    Args:
        entity: Entity identifier.

    Returns:
        Registered rule set.

    Raises:
        SilverlineTransformError: If the entity is unknown.
    """
    rules = ENTITY_RULES.get(cast(EntityName, entity))
    if rules is None:
        supported = ", ".join(ENTITY_RULES)
        raise SilverlineTransformError(
            f"Unsupported entity '{entity}'. Use one of: {supported}."
        )
    return rules


def reconcile_batch(
    entity: str,
    records: Sequence[RawRecord],
    processed_at: datetime,
) -> list[SilverRecord]:
    """Reconcile one raw batch into silver records sorted by natural key.

    Args:
        entity: Entity identifier.
        records: Raw batch in input order.
        processed_at: Processing timestamp stamped on every record.

    Returns:
        Silver records, exactly one per natural key.

    Raises:
        SilverlineTransformError: If the entity is unknown.
    """
    rules = get_entity_rules(entity)
    silver_records = rules.reconcile(records, processed_at)
    return sorted(silver_records, key=rules.natural_key)

