"""Shared typed models.

This module defines immutable raw (bronze) and cleansed (silver) record
models plus the request and result types passed between the ingest,
transform, and store layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Union

EntityName = Literal[
    "customer_profile",
    "product",
    "sales_line",
    "customer_demographic",
    "customer_location",
    "product_category",
]
ENTITY_NAMES: tuple[EntityName, ...] = (
    "customer_profile",
    "product",
    "sales_line",
    "customer_demographic",
    "customer_location",
    "product_category",
)

MaritalStatus = Literal["Single", "Married", "Unknown"]
Gender = Literal["Female", "Male", "Unknown"]
ProductLine = Literal["Mountain", "Road", "Touring", "Other"]
MaintenanceFlag = Literal["Yes", "No", "Unknown"]
EntityRunStatus = Literal["succeeded", "failed"]

MARITAL_STATUS_VALUES: tuple[MaritalStatus, ...] = ("Single", "Married", "Unknown")
GENDER_VALUES: tuple[Gender, ...] = ("Female", "Male", "Unknown")
PRODUCT_LINE_VALUES: tuple[ProductLine, ...] = ("Mountain", "Road", "Touring", "Other")
MAINTENANCE_FLAG_VALUES: tuple[MaintenanceFlag, ...] = ("Yes", "No", "Unknown")


@dataclass(frozen=True)
class RawCustomerProfile:
    """CRM customer row as extracted."""

    cst_id: int | None
    cst_key: str | None
    cst_firstname: str | None
    cst_lastname: str | None
    cst_marital_status: str | None
    cst_gndr: str | None
    cst_create_date: date | None


@dataclass(frozen=True)
class RawProduct:
    """CRM product version row as extracted."""

    prd_id: int | None
    prd_key: str | None
    prd_nm: str | None
    prd_cost: Decimal | None
    prd_line: str | None
    prd_start_dt: date | None
    prd_end_dt: date | None


@dataclass(frozen=True)
class RawSalesLine:
    """CRM sales line row; dates are packed ``YYYYMMDD`` integers."""

    sls_ord_num: str | None
    sls_prd_key: str | None
    sls_cust_id: int | None
    sls_order_dt: int | None
    sls_ship_dt: int | None
    sls_due_dt: int | None
    sls_sales: Decimal | None
    sls_quantity: int | None
    sls_price: Decimal | None


@dataclass(frozen=True)
class RawCustomerDemographic:
    """ERP customer demographic row as extracted."""

    cid: str | None
    bdate: date | None
    gen: str | None


@dataclass(frozen=True)
class RawCustomerLocation:
    """ERP customer location row as extracted."""

    cid: str | None
    cntry: str | None


@dataclass(frozen=True)
class RawProductCategory:
    """ERP product category row as extracted."""

    id: str | None
    cat: str | None
    subcat: str | None
    maintenance: str | None


@dataclass(frozen=True)
class CustomerProfile:
    """Cleansed customer profile, one per ``cst_id``."""

    cst_id: int
    cst_key: str | None
    cst_firstname: str | None
    cst_lastname: str | None
    cst_marital_status: MaritalStatus
    cst_gndr: Gender
    cst_create_date: date | None
    dwh_date_loaded: datetime


@dataclass(frozen=True)
class Product:
    """Cleansed product version with a derived validity interval.

    Attributes:
        prd_id: Unique version identifier.
        prd_key: Business key shared by all versions of one product.
        cat_id: Category code taken from the key prefix.
        prd_key_clean: Key suffix after the category code.
        prd_nm: Product name.
        prd_cost: Cost, zero when missing.
        prd_line: Cleaned raw product line code.
        prd_line_desc: Canonical product line.
        prd_start_dt: Version start date.
        prd_end_dt: Day before the next version starts, or the raw end date.
        dwh_date_loaded: Audit timestamp of the producing run.
    """

    prd_id: int
    prd_key: str | None
    cat_id: str | None
    prd_key_clean: str | None
    prd_nm: str | None
    prd_cost: Decimal
    prd_line: str | None
    prd_line_desc: ProductLine
    prd_start_dt: date | None
    prd_end_dt: date | None
    dwh_date_loaded: datetime


@dataclass(frozen=True)
class SalesLine:
    """Cleansed sales line, one per order number and product key."""

    sls_ord_num: str
    sls_prd_key: str
    sls_cust_id: int | None
    sls_order_dt: date | None
    sls_ship_dt: date | None
    sls_due_dt: date | None
    sls_sales: Decimal
    sls_quantity: int
    sls_price: Decimal
    dwh_date_loaded: datetime


@dataclass(frozen=True)
class CustomerDemographic:
    """Cleansed ERP demographic keyed by tag-stripped customer id."""

    cid: str
    bdate: date | None
    gen: Gender
    dwh_date_loaded: datetime


@dataclass(frozen=True)
class CustomerLocation:
    """Cleansed ERP customer location."""

    cid: str
    cntry: str
    dwh_date_loaded: datetime


@dataclass(frozen=True)
class ProductCategory:
    """Cleansed ERP product category."""

    id: str
    cat: str | None
    subcat: str | None
    maintenance: MaintenanceFlag
    dwh_date_loaded: datetime


RawRecord = Union[
    RawCustomerProfile,
    RawProduct,
    RawSalesLine,
    RawCustomerDemographic,
    RawCustomerLocation,
    RawProductCategory,
]
SilverRecord = Union[
    CustomerProfile,
    Product,
    SalesLine,
    CustomerDemographic,
    CustomerLocation,
    ProductCategory,
]


@dataclass(frozen=True)
class OutputManifest:
    """Metadata of one published entity output set.

    Attributes:
        entity: Entity identifier.
        version_id: Immutable output version id.
        created_at: UTC publication timestamp.
        processed_at: Audit timestamp stamped on every record.
        source_uri: Raw extract the output was computed from.
        record_count: Number of records in the output set.
        records_digest: Content hash of the records file.
    """

    entity: EntityName
    version_id: str
    created_at: datetime
    processed_at: datetime
    source_uri: str
    record_count: int
    records_digest: str


@dataclass(frozen=True)
class OutputWriteRequest:
    """Request payload for publishing an entity output set."""

    entity: EntityName
    records: tuple[SilverRecord, ...]
    processed_at: datetime
    source_uri: str


@dataclass(frozen=True)
class ReconcileOptions:
    """Reconcile command options.

    Attributes:
        source_uri: Raw extract directory or YAML source manifest path.
        entities: Entities to rebuild; all entities when empty.
        processed_at: Fixed processing time; current UTC time when omitted.
    """

    source_uri: str
    entities: tuple[EntityName, ...] = ()
    processed_at: datetime | None = None


@dataclass(frozen=True)
class EntityRunResult:
    """Outcome of one entity pipeline run."""

    entity: EntityName
    status: EntityRunStatus
    version_id: str | None = None
    input_count: int = 0
    output_count: int = 0
    error: str | None = None


@dataclass(frozen=True)
class VersionExportRequest:
    """Request payload for exporting an output version.

    Attributes:
        entity: Entity identifier.
        version_id: Version to export.
        output_uri: Destination URI (currently s3:// only).
    """

    entity: EntityName
    version_id: str
    output_uri: str
