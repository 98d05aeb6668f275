# app/models.py
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# -----------------------------
# Models
# -----------------------------
class Property(Base):
    __tablename__ = "properties"
    __table_args__ = (
        UniqueConstraint("address", "city", "state", "zip_code", name="uq_property_addr"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    landlord_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    address: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(80), index=True)
    state: Mapped[str] = mapped_column(String(80))
    zip_code: Mapped[str] = mapped_column(String(12))

    # monthly rent, minor currency units (cents)
    rent: Mapped[int] = mapped_column(Integer)
    bedrooms: Mapped[int] = mapped_column(Integer, default=0)
    bathrooms: Mapped[int] = mapped_column(Integer, default=1)
    square_feet: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # list of amenity tags, e.g. ["parking", "gym"]
    amenities: Mapped[list] = mapped_column(JSON, default=list)

    available: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    # null = available now
    available_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class TenantScore(Base):
    """
    One row per scoring event. Exactly one row per tenant is `active`;
    older rows are archived (active = false), never deleted.
    """

    __tablename__ = "tenant_scores"
    __table_args__ = (
        Index(
            "uq_tenant_score_active",
            "tenant_id",
            unique=True,
            sqlite_where=text("active = 1"),
            postgresql_where=text("active = true"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(Integer, index=True)
    landlord_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    property_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    application_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # derived from the sub-scores by app.domain.scoring.compute_overall
    overall_score: Mapped[int] = mapped_column(Integer)

    # sub-scores, 0-100, null = not yet verified (treated as neutral)
    payment_history: Mapped[int | None] = mapped_column(Integer, nullable=True)
    credit_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    income_stability: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rental_history: Mapped[int | None] = mapped_column(Integer, nullable=True)
    employment_stability: Mapped[int | None] = mapped_column(Integer, nullable=True)
    identity_verification: Mapped[int | None] = mapped_column(Integer, nullable=True)
    references: Mapped[int | None] = mapped_column("reference_score", Integer, nullable=True)
    application_quality: Mapped[int | None] = mapped_column(Integer, nullable=True)
    promptness: Mapped[int | None] = mapped_column(Integer, nullable=True)
    eviction_history: Mapped[int | None] = mapped_column(Integer, nullable=True)
    criminal_check: Mapped[int | None] = mapped_column(Integer, nullable=True)

    scoring_method: Mapped[str] = mapped_column(String(40), default="standard")
    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    scored_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
