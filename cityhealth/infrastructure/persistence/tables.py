"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)
from sqlalchemy.types import JSON

metadata = MetaData()

# ============================================================================
# PROVIDERS TABLE
# ============================================================================
# Filterable and sortable fields live in columns; everything else the backend
# stores for a provider is kept in the JSON document.
providers_table = Table(
    "providers",
    metadata,
    Column("id", String, primary_key=True),
    Column("type", String(16), nullable=False),  # ProviderCategory as string
    Column("city", String, nullable=True),
    Column("verified", Boolean, nullable=False, default=False),
    Column("claimed", Boolean, nullable=False, default=False),
    Column("rating", Float, nullable=False, default=0.0),
    Column("accessibility", Boolean, nullable=False, default=False),
    Column("home_visits", Boolean, nullable=False, default=False),
    Column("available_24_7", Boolean, nullable=False, default=False),
    Column("view_count", Integer, nullable=False, default=0),
    Column("document", JSON, nullable=False),
)

Index("idx_providers_verified_rating", providers_table.c.verified, providers_table.c.rating)
Index(
    "idx_providers_verified_type_city_rating",
    providers_table.c.verified,
    providers_table.c.type,
    providers_table.c.city,
    providers_table.c.rating,
)

COLUMN_FIELDS: tuple[str, ...] = (
    "type",
    "city",
    "verified",
    "claimed",
    "rating",
    "accessibility",
    "home_visits",
    "available_24_7",
    "view_count",
)
