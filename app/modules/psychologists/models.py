import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, ForeignKey, UniqueConstraint
from app.core.base import Base, TimestampedTenantMixin

class Psychologist(Base, TimestampedTenantMixin):
    __table_args__ = (UniqueConstraint("org_id", "license_number", name="uq_psychologist_org_license"),)

    name: Mapped[str] = mapped_column(String(200), index=True)
    license_number: Mapped[str] = mapped_column(String(32))  # CRP
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

# Times are kept exactly as submitted ("HH:MM"); see validation.py for how they are compared.
class AvailableTime(Base, TimestampedTenantMixin):
    __tablename__ = "available_time"
    agenda_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("agenda.id", ondelete="CASCADE"), index=True)
    start_time: Mapped[str] = mapped_column(String(8))
    end_time: Mapped[str] = mapped_column(String(8))

# One weekday of a psychologist's weekly agenda: weekday 0=Mon..6=Sun
class Agenda(Base, TimestampedTenantMixin):
    psychologist_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("psychologist.id", ondelete="CASCADE"), index=True)
    weekday: Mapped[int] = mapped_column(Integer)

    available_times: Mapped[list[AvailableTime]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by=AvailableTime.start_time
    )
