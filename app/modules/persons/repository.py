import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.upsert import insert_ignore_conflict
from app.modules.persons.models import Person

class PersonRepository:
    REQUIRED = {"name"}

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, **data) -> Person:
        obj = Person(org_id=org_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, person_id: uuid.UUID) -> Person | None:
        q = select(Person).where(
            Person.id == person_id,
            Person.org_id == org_id,
            Person.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def get_by_national_id(self, org_id: uuid.UUID, national_id: str) -> Person | None:
        q = select(Person).where(
            Person.org_id == org_id,
            Person.national_id == national_id,
            Person.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def find_or_create(self, org_id: uuid.UUID, **data) -> Person:
        """Return the person holding ``national_id``, inserting one from ``data`` if absent."""
        await insert_ignore_conflict(self.session, Person, ("org_id", "national_id"), {"org_id": org_id, **data})
        obj = await self.get_by_national_id(org_id, data["national_id"])
        if obj is None:
            # conflicting row exists but is soft-deleted
            raise LookupError(f"Person {data['national_id']} is archived")
        return obj

    async def update(self, org_id: uuid.UUID, person_id: uuid.UUID, **data) -> Person | None:
        obj = await self.get(org_id, person_id)
        if not obj:
            return None
        for k, v in data.items():
            if v is None and k in self.REQUIRED:
                continue
            setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete(self, person: Person) -> None:
        await self.session.delete(person)
        await self.session.flush()
