"""Lender, program and reference-data domain models for the matching engine."""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lendermatch.core.enums import CriterionDataType
from lendermatch.db.base import Base, TimestampMixin


class Lender(TimestampMixin, Base):
    """Lender entity. Deactivated rather than deleted."""

    __tablename__ = "lenders"

    lender_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    # Basic Information
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    website_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    # Ranking tiebreaker (0-100)
    profile_score: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)

    # Relationships
    programs: Mapped[list["Program"]] = relationship(
        "Program",
        back_populates="lender",
        cascade="all, delete-orphan",
    )
    states: Mapped[list["LenderState"]] = relationship(
        "LenderState",
        back_populates="lender",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Lender(lender_id={self.lender_id}, name={self.name!r}, active={self.active})>"


class LenderState(Base):
    """A state a lender is explicitly known to operate in.

    A lender with no rows at all is nationwide.
    """

    __tablename__ = "lender_states"

    lender_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("lenders.lender_id", ondelete="CASCADE"),
        primary_key=True,
    )
    state_code: Mapped[str] = mapped_column(String(2), primary_key=True)

    lender: Mapped["Lender"] = relationship("Lender", back_populates="states")

    def __repr__(self) -> str:
        return f"<LenderState(lender_id={self.lender_id}, state_code={self.state_code!r})>"


class Program(TimestampMixin, Base):
    """Versioned loan product. Identity is (program_id, program_version)."""

    __tablename__ = "programs"

    program_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    program_version: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)

    lender_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("lenders.lender_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Program Identification
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Availability
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    valid_from: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    valid_to: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Relationships
    lender: Mapped["Lender"] = relationship("Lender", back_populates="programs")
    criteria: Mapped[list["ProgramCriterion"]] = relationship(
        "ProgramCriterion",
        back_populates="program",
        cascade="all, delete-orphan",
    )
    metros: Mapped[list["ProgramMetro"]] = relationship(
        "ProgramMetro",
        back_populates="program",
        cascade="all, delete-orphan",
    )
    pricing_rows: Mapped[list["PricingMatrixRow"]] = relationship(
        "PricingMatrixRow",
        back_populates="program",
        cascade="all, delete-orphan",
    )

    def is_available_on(self, as_of: date) -> bool:
        """Whether the program is active and inside its validity window."""
        if not self.active:
            return False
        if self.valid_from is not None and as_of < self.valid_from:
            return False
        if self.valid_to is not None and as_of > self.valid_to:
            return False
        return True

    def __repr__(self) -> str:
        return (
            f"<Program(program_id={self.program_id}, version={self.program_version}, "
            f"name={self.name!r}, product_type={self.product_type!r})>"
        )


class ProgramCriterion(TimestampMixin, Base):
    """One named constraint on a specific program version.

    Numeric criteria use the hard/soft bound columns, enum criteria use
    enum_values, bool criteria use bool_value. A criterion with none of
    these populated is vacuously satisfied.
    """

    __tablename__ = "program_criteria"
    __table_args__ = (
        ForeignKeyConstraint(
            ["program_id", "program_version"],
            ["programs.program_id", "programs.program_version"],
            ondelete="CASCADE",
        ),
    )

    criterion_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    program_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    program_version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Criterion Identification
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    data_type: Mapped[CriterionDataType] = mapped_column(
        SQLEnum(
            CriterionDataType,
            name="criterion_data_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )

    # Thresholds
    hard_min: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    hard_max: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    soft_min: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    soft_max: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    enum_values: Mapped[Optional[list[str]]] = mapped_column(ARRAY(String(100)), nullable=True)
    bool_value: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    required_flag: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    program: Mapped["Program"] = relationship("Program", back_populates="criteria")

    def __repr__(self) -> str:
        return (
            f"<ProgramCriterion(name={self.name!r}, type={self.data_type.value}, "
            f"hard=[{self.hard_min}, {self.hard_max}], soft=[{self.soft_min}, {self.soft_max}], "
            f"required={self.required_flag})>"
        )


class Metro(Base):
    """Metropolitan area used for program-level coverage overrides."""

    __tablename__ = "metros"

    metro_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    state_code: Mapped[str] = mapped_column(String(2), nullable=False, index=True)
    coverage_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Metro(metro_id={self.metro_id}, name={self.name!r}, state={self.state_code!r})>"


class ProgramMetro(Base):
    """Narrows one program version to a fixed set of metros."""

    __tablename__ = "program_metros"
    __table_args__ = (
        ForeignKeyConstraint(
            ["program_id", "program_version"],
            ["programs.program_id", "programs.program_version"],
            ondelete="CASCADE",
        ),
    )

    program_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    program_version: Mapped[int] = mapped_column(Integer, primary_key=True)
    metro_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("metros.metro_id", ondelete="CASCADE"),
        primary_key=True,
    )

    program: Mapped["Program"] = relationship("Program", back_populates="metros")

    def __repr__(self) -> str:
        return (
            f"<ProgramMetro(program_id={self.program_id}, version={self.program_version}, "
            f"metro_id={self.metro_id})>"
        )


class PricingMatrixRow(TimestampMixin, Base):
    """Rate spread for one LTV band x DSCR band cell of a program version."""

    __tablename__ = "pricing_matrix"
    __table_args__ = (
        ForeignKeyConstraint(
            ["program_id", "program_version"],
            ["programs.program_id", "programs.program_version"],
            ondelete="CASCADE",
        ),
    )

    matrix_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    program_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    program_version: Mapped[int] = mapped_column(Integer, nullable=False)

    spread_bps: Mapped[int] = mapped_column(Integer, nullable=False)
    ltv_band: Mapped[str] = mapped_column(String(20), nullable=False)  # e.g. "65-70"
    dscr_band: Mapped[str] = mapped_column(String(20), nullable=False)  # e.g. "1.25-1.35", "1.35+"

    program: Mapped["Program"] = relationship("Program", back_populates="pricing_rows")

    def __repr__(self) -> str:
        return (
            f"<PricingMatrixRow(program_id={self.program_id}, ltv={self.ltv_band!r}, "
            f"dscr={self.dscr_band!r}, spread_bps={self.spread_bps})>"
        )
