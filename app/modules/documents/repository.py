import uuid
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.documents.models import Document
from app.modules.patients.models import Patient
from app.modules.persons.models import Person

class DocumentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, org_id: uuid.UUID, *, patient_id: uuid.UUID, title: str, storage_key: str, doc_link: str, mime_type: str) -> Document:
        obj = Document(
            org_id=org_id, patient_id=patient_id, title=title,
            storage_key=storage_key, doc_link=doc_link, mime_type=mime_type,
        )
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, org_id: uuid.UUID, document_id: uuid.UUID) -> Document | None:
        res = await self.session.execute(select(Document).where(
            Document.id == document_id,
            Document.org_id == org_id,
            Document.deleted_at.is_(None),
        ))
        return res.scalar_one_or_none()

    async def list_for_patient(self, org_id: uuid.UUID, patient_id: uuid.UUID) -> Sequence[Document]:
        res = await self.session.execute(select(Document).where(
            Document.org_id == org_id,
            Document.patient_id == patient_id,
            Document.deleted_at.is_(None),
        ).order_by(Document.created_at))
        return res.scalars().all()

    async def list_for_psychologist(self, org_id: uuid.UUID, psychologist_id: uuid.UUID) -> list[dict]:
        q = (
            select(
                Document.id, Document.title, Document.doc_link,
                Patient.id.label("patient_id"), Person.name.label("patient_name"),
            )
            .join(Patient, Patient.id == Document.patient_id)
            .join(Person, Person.id == Patient.person_id)
            .where(
                Document.org_id == org_id,
                Document.deleted_at.is_(None),
                Patient.psychologist_id == psychologist_id,
            )
            .order_by(Document.created_at)
        )
        res = await self.session.execute(q)
        return [dict(row) for row in res.mappings().all()]

    async def delete(self, document: Document) -> None:
        await self.session.delete(document)
        await self.session.flush()
