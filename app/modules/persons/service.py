import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.persons.repository import PersonRepository
from app.modules.persons.schemas import PersonUpdate
from app.modules.persons.models import Person

class PersonService:
    def __init__(self, session: AsyncSession):
        self.repo = PersonRepository(session)
        self.session = session

    async def get(self, org_id: uuid.UUID, person_id: uuid.UUID) -> Person | None:
        return await self.repo.get(org_id, person_id)

    async def get_by_national_id(self, org_id: uuid.UUID, national_id: str) -> Person | None:
        return await self.repo.get_by_national_id(org_id, national_id)

    async def update(self, org_id: uuid.UUID, person_id: uuid.UUID, payload: PersonUpdate) -> Person | None:
        obj = await self.repo.update(org_id, person_id, **payload.model_dump(exclude_unset=True))
        if obj:
            await self.session.commit()
        return obj
