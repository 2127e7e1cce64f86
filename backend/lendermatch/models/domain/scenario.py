"""Loan scenario domain model."""

import uuid
from typing import Optional

from sqlalchemy import Enum as SQLEnum, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from lendermatch.core.enums import ScenarioStatus
from lendermatch.db.base import Base, TimestampMixin


class Scenario(TimestampMixin, Base):
    """Borrower loan scenario submitted by a broker for matching."""

    __tablename__ = "scenarios"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    external_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, unique=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[ScenarioStatus] = mapped_column(
        SQLEnum(
            ScenarioStatus,
            name="scenario_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        default=ScenarioStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # Borrower, property and loan attributes, nested camelCase or snake_case
    # e.g. {"loan": {"loanAmount": 595000}, "borrower": {"creditScore": 720}}
    loan_data: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    created_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Scenario(id={self.id}, title={self.title!r}, status={self.status.value})>"
