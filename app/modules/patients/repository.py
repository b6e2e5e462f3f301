import uuid
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.upsert import insert_ignore_conflict
from app.modules.patients.models import Patient, School, Comorbidity, Medicine

class PatientRepository:
    REQUIRED = {"payment_plan"}

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, **data) -> Patient:
        obj = Patient(org_id=org_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, patient_id: uuid.UUID) -> Patient | None:
        q = select(Patient).where(
            Patient.id == patient_id,
            Patient.org_id == org_id,
            Patient.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list(self, org_id: uuid.UUID, limit: int = 50, offset: int = 0) -> Sequence[Patient]:
        q = select(Patient).where(
            Patient.org_id == org_id,
            Patient.deleted_at.is_(None),
        ).order_by(Patient.created_at.desc()).limit(limit).offset(offset)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, org_id: uuid.UUID, patient_id: uuid.UUID, **data) -> Patient | None:
        obj = await self.get(org_id, patient_id)
        if not obj:
            return None
        for k, v in data.items():
            # explicit null clears optional fields such as psychologist_id
            if v is None and k in self.REQUIRED:
                continue
            setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete_with_person(self, patient: Patient) -> None:
        # medicines and link rows go with the patient; school/comorbidities/parents stay
        await self.session.delete(patient.person)
        await self.session.delete(patient)
        await self.session.flush()

    # medicines
    async def add_medicine(self, org_id: uuid.UUID, patient: Patient, **data) -> Medicine:
        obj = Medicine(org_id=org_id, **data)
        patient.medicines.append(obj)
        await self.session.flush()
        return obj

class SchoolRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_name(self, org_id: uuid.UUID, name: str) -> School | None:
        res = await self.session.execute(select(School).where(
            School.org_id == org_id, School.name == name, School.deleted_at.is_(None)
        ))
        return res.scalar_one_or_none()

    async def find_or_create(self, org_id: uuid.UUID, **data) -> School:
        await insert_ignore_conflict(self.session, School, ("org_id", "name"), {"org_id": org_id, **data})
        obj = await self.get_by_name(org_id, data["name"])
        if obj is None:
            raise LookupError(f"School {data['name']!r} is archived")
        return obj

class ComorbidityRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_name(self, org_id: uuid.UUID, name: str) -> Sequence[Comorbidity]:
        res = await self.session.execute(select(Comorbidity).where(
            Comorbidity.org_id == org_id, Comorbidity.name == name, Comorbidity.deleted_at.is_(None)
        ).order_by(Comorbidity.created_at))
        return res.scalars().all()

    async def find_or_create(self, org_id: uuid.UUID, name: str) -> Comorbidity:
        await insert_ignore_conflict(self.session, Comorbidity, ("org_id", "name"), {"org_id": org_id, "name": name})
        found = await self.list_by_name(org_id, name)
        if not found:
            raise LookupError(f"Comorbidity {name!r} is archived")
        return found[0]
