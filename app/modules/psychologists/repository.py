import uuid
from typing import Sequence
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.psychologists.models import Psychologist, Agenda, AvailableTime
from app.modules.patients.models import Patient

class PsychologistRepository:
    REQUIRED = {"name"}
    def __init__(self, s: AsyncSession): self.s = s

    async def create(self, org: uuid.UUID, **data) -> Psychologist:
        obj = Psychologist(org_id=org, **data); self.s.add(obj); await self.s.flush(); return obj

    async def get(self, org: uuid.UUID, psychologist_id: uuid.UUID) -> Psychologist | None:
        res = await self.s.execute(select(Psychologist).where(
            Psychologist.id == psychologist_id, Psychologist.org_id == org, Psychologist.deleted_at.is_(None)
        ))
        return res.scalar_one_or_none()

    async def list(self, org: uuid.UUID) -> Sequence[Psychologist]:
        res = await self.s.execute(select(Psychologist).where(
            Psychologist.org_id == org, Psychologist.deleted_at.is_(None)
        ).order_by(Psychologist.name))
        return res.scalars().all()

    async def update(self, org: uuid.UUID, psychologist_id: uuid.UUID, **data) -> Psychologist | None:
        obj = await self.get(org, psychologist_id)
        if not obj:
            return None
        for k, v in data.items():
            if v is None and k in self.REQUIRED:
                continue
            setattr(obj, k, v)
        await self.s.flush()
        return obj

    async def delete(self, obj: Psychologist) -> None:
        # patients stay, unassigned
        await self.s.execute(
            update(Patient).where(Patient.org_id == obj.org_id, Patient.psychologist_id == obj.id).values(psychologist_id=None)
        )
        await self.s.delete(obj); await self.s.flush()

class AgendaRepository:
    def __init__(self, s: AsyncSession): self.s = s

    async def create(self, org: uuid.UUID, *, psychologist_id: uuid.UUID, weekday: int, windows: list[dict]) -> Agenda:
        obj = Agenda(
            org_id=org, psychologist_id=psychologist_id, weekday=weekday,
            available_times=[AvailableTime(org_id=org, **w) for w in windows],
        )
        self.s.add(obj); await self.s.flush(); return obj

    async def get(self, org: uuid.UUID, agenda_id: uuid.UUID) -> Agenda | None:
        res = await self.s.execute(select(Agenda).where(
            Agenda.id == agenda_id, Agenda.org_id == org, Agenda.deleted_at.is_(None)
        ))
        return res.scalar_one_or_none()

    async def list(self, org: uuid.UUID) -> Sequence[Agenda]:
        res = await self.s.execute(select(Agenda).where(
            Agenda.org_id == org, Agenda.deleted_at.is_(None)
        ).order_by(Agenda.psychologist_id, Agenda.weekday))
        return res.scalars().all()

    async def list_for_psychologist(self, org: uuid.UUID, psychologist_id: uuid.UUID) -> Sequence[Agenda]:
        res = await self.s.execute(select(Agenda).where(
            Agenda.org_id == org, Agenda.psychologist_id == psychologist_id, Agenda.deleted_at.is_(None)
        ).order_by(Agenda.weekday))
        return res.scalars().all()

    async def delete(self, obj: Agenda) -> None:
        await self.s.delete(obj); await self.s.flush()
