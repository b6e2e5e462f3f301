from datetime import date
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Date, JSON, UniqueConstraint
from app.core.base import Base, TimestampedTenantMixin

# Patients and their parents/guardians are both stored as Person rows.
class Person(Base, TimestampedTenantMixin):
    __table_args__ = (UniqueConstraint("org_id", "national_id", name="uq_person_org_national_id"),)

    name: Mapped[str] = mapped_column(String(200))
    birthdate: Mapped[date | None] = mapped_column(Date, nullable=True)
    national_id: Mapped[str] = mapped_column(String(32), index=True)  # CPF
    rg: Mapped[str | None] = mapped_column(String(32), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[dict | None] = mapped_column(JSON, nullable=True)
