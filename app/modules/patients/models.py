import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, JSON, ForeignKey, Table, Column, UniqueConstraint
from app.core.base import Base, TimestampedTenantMixin
from app.modules.persons.models import Person

patient_comorbidity = Table(
    "patient_comorbidity",
    Base.metadata,
    Column("patient_id", ForeignKey("patient.id", ondelete="CASCADE"), primary_key=True),
    Column("comorbidity_id", ForeignKey("comorbidity.id", ondelete="CASCADE"), primary_key=True),
)

patient_parent = Table(
    "patient_parent",
    Base.metadata,
    Column("patient_id", ForeignKey("patient.id", ondelete="CASCADE"), primary_key=True),
    Column("person_id", ForeignKey("person.id", ondelete="CASCADE"), primary_key=True),
)

class School(Base, TimestampedTenantMixin):
    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_school_org_name"),)

    name: Mapped[str] = mapped_column(String(200), index=True)
    tax_id: Mapped[str | None] = mapped_column(String(32), nullable=True)  # CNPJ
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[dict | None] = mapped_column(JSON, nullable=True)

class Comorbidity(Base, TimestampedTenantMixin):
    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_comorbidity_org_name"),)

    name: Mapped[str] = mapped_column(String(160), index=True)

class Medicine(Base, TimestampedTenantMixin):
    patient_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patient.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(160))
    dosage: Mapped[str | None] = mapped_column(String(120), nullable=True)
    schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)  # how/when it is taken

class Patient(Base, TimestampedTenantMixin):
    payment_plan: Mapped[str] = mapped_column(String(16))  # monthly | bimonthly | quarterly | semiannual | annual
    person_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("person.id", ondelete="CASCADE"), unique=True)
    school_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("school.id"))
    psychologist_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("psychologist.id", ondelete="SET NULL"), nullable=True, index=True)

    person: Mapped[Person] = relationship(foreign_keys=[person_id], lazy="selectin")
    school: Mapped[School] = relationship(lazy="selectin")
    comorbidities: Mapped[list[Comorbidity]] = relationship(secondary=patient_comorbidity, lazy="selectin")
    parents: Mapped[list[Person]] = relationship(secondary=patient_parent, lazy="selectin")
    medicines: Mapped[list[Medicine]] = relationship(cascade="all, delete-orphan", lazy="selectin", order_by=Medicine.created_at)
