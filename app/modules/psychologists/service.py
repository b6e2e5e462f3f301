import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.psychologists.repository import PsychologistRepository, AgendaRepository
from app.modules.psychologists.schemas import PsychologistCreate, PsychologistUpdate, DayAgendaIn
from app.modules.psychologists.models import Psychologist, Agenda
from app.modules.psychologists.validation import validate_agendas

logger = logging.getLogger(__name__)

class PsychologistService:
    def __init__(self, s: AsyncSession):
        self.s = s
        self.repo = PsychologistRepository(s)
        self.agendas = AgendaRepository(s)

    async def create(self, org: uuid.UUID, payload: PsychologistCreate) -> Psychologist:
        obj = await self.repo.create(org, **payload.model_dump())
        await self.s.commit()
        return obj

    async def get(self, org: uuid.UUID, psychologist_id: uuid.UUID) -> Psychologist | None:
        return await self.repo.get(org, psychologist_id)

    async def list_psychologists(self, org: uuid.UUID):
        return await self.repo.list(org)

    async def update(self, org: uuid.UUID, psychologist_id: uuid.UUID, payload: PsychologistUpdate) -> Psychologist | None:
        obj = await self.repo.update(org, psychologist_id, **payload.model_dump(exclude_unset=True))
        if obj:
            await self.s.commit()
        return obj

    async def remove(self, org: uuid.UUID, psychologist_id: uuid.UUID) -> bool:
        obj = await self.repo.get(org, psychologist_id)
        if not obj:
            return False
        for agenda in await self.agendas.list_for_psychologist(org, psychologist_id):
            await self.agendas.delete(agenda)
        await self.repo.delete(obj)
        await self.s.commit()
        return True

class AgendaService:
    def __init__(self, s: AsyncSession):
        self.s = s
        self.repo = AgendaRepository(s)
        self.psychologists = PsychologistRepository(s)

    async def _store(self, org: uuid.UUID, psychologist_id: uuid.UUID, days: list[DayAgendaIn]) -> list[Agenda]:
        return [
            await self.repo.create(
                org, psychologist_id=psychologist_id, weekday=day.weekday,
                windows=[w.model_dump() for w in day.available_times],
            )
            for day in days
        ]

    async def create(self, org: uuid.UUID, psychologist_id: uuid.UUID, days: list[DayAgendaIn]) -> list[Agenda] | None:
        validate_agendas(days)
        if not await self.psychologists.get(org, psychologist_id):
            return None
        created = await self._store(org, psychologist_id, days)
        await self.s.commit()
        return created

    async def replace(self, org: uuid.UUID, psychologist_id: uuid.UUID, days: list[DayAgendaIn]) -> list[Agenda] | None:
        """Swap the psychologist's whole weekly agenda for ``days``."""
        validate_agendas(days)
        if not await self.psychologists.get(org, psychologist_id):
            return None
        for agenda in await self.repo.list_for_psychologist(org, psychologist_id):
            await self.repo.delete(agenda)
        created = await self._store(org, psychologist_id, days)
        await self.s.commit()
        logger.info(f"Replaced agenda of psychologist {psychologist_id} with {len(created)} day(s)")
        return created

    async def list_agendas(self, org: uuid.UUID):
        return await self.repo.list(org)

    async def list_for_psychologist(self, org: uuid.UUID, psychologist_id: uuid.UUID):
        return await self.repo.list_for_psychologist(org, psychologist_id)

    async def remove(self, org: uuid.UUID, agenda_id: uuid.UUID) -> bool:
        obj = await self.repo.get(org, agenda_id)
        if not obj:
            return False
        await self.repo.delete(obj)
        await self.s.commit()
        return True
