import logging
import uuid
from typing import Sequence
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.platform.ports.object_storage import ObjectStoragePort
from app.platform.provider_registry import registry
from app.modules.documents.cleanup import discard_objects
from app.modules.documents.models import Document
from app.modules.documents.repository import DocumentRepository
from app.modules.patients.repository import PatientRepository

logger = logging.getLogger(__name__)

class DocumentStorageError(Exception):
    """Raised when the object store rejects an upload."""

class DocumentService:
    def __init__(self, session: AsyncSession, storage: ObjectStoragePort | None = None):
        self.session = session
        self.repo = DocumentRepository(session)
        self.patients = PatientRepository(session)
        self.storage = storage or registry.object_storage()

    def _store(self, org_id: uuid.UUID, patient_id: uuid.UUID, filename: str | None, content_type: str, data: bytes) -> tuple[str, str]:
        ext = ""
        if filename and "." in filename:
            ext = filename.rsplit(".", 1)[1].lower()
        key = f"documents/{org_id}/{patient_id}/{uuid.uuid4().hex}{('.' + ext) if ext else ''}"
        try:
            self.storage.put_bytes(key, data, content_type=content_type)
        except Exception as e:
            raise DocumentStorageError(f"Upload of {filename or key!r} failed: {e}") from e
        return key, self.storage.object_url(key)

    async def create(self, org_id: uuid.UUID, patient_id: uuid.UUID, title: str, file: UploadFile) -> Document | None:
        if not await self.patients.get(org_id, patient_id):
            return None
        data = await file.read()
        mime_type = file.content_type or "application/octet-stream"
        key, url = self._store(org_id, patient_id, file.filename, mime_type, data)
        try:
            obj = await self.repo.create(org_id, patient_id=patient_id, title=title, storage_key=key, doc_link=url, mime_type=mime_type)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            discard_objects(self.storage, [key])
            raise
        return obj

    async def create_follow_ups(self, org_id: uuid.UUID, patient_id: uuid.UUID, files: list[UploadFile]) -> list[Document] | None:
        """Store a batch of follow-up files; either every file is saved or none is."""
        if not await self.patients.get(org_id, patient_id):
            return None
        uploaded: list[str] = []
        created: list[Document] = []
        try:
            for file in files:
                data = await file.read()
                mime_type = file.content_type or "application/octet-stream"
                key, url = self._store(org_id, patient_id, file.filename, mime_type, data)
                uploaded.append(key)
                created.append(await self.repo.create(
                    org_id, patient_id=patient_id, title=file.filename or key.rsplit("/", 1)[-1],
                    storage_key=key, doc_link=url, mime_type=mime_type,
                ))
            await self.session.commit()
        except Exception as e:
            logger.error(f"Follow-up batch for patient {patient_id} failed after {len(uploaded)} upload(s): {e}")
            await self.session.rollback()
            discard_objects(self.storage, uploaded)
            raise
        logger.info(f"Stored {len(created)} follow-up document(s) for patient {patient_id}")
        return created

    async def get(self, org_id: uuid.UUID, document_id: uuid.UUID) -> Document | None:
        return await self.repo.get(org_id, document_id)

    async def list_for_patient(self, org_id: uuid.UUID, patient_id: uuid.UUID) -> Sequence[Document]:
        return await self.repo.list_for_patient(org_id, patient_id)

    async def list_for_psychologist(self, org_id: uuid.UUID, psychologist_id: uuid.UUID) -> list[dict]:
        return await self.repo.list_for_psychologist(org_id, psychologist_id)

    async def download_url(self, org_id: uuid.UUID, document_id: uuid.UUID) -> dict | None:
        obj = await self.repo.get(org_id, document_id)
        if not obj:
            return None
        ttl = settings.DOWNLOAD_URL_TTL_SECONDS
        return {"id": obj.id, "download_url": self.storage.presign_download(obj.storage_key, expires_seconds=ttl), "expires_in": ttl}

    async def update(self, org_id: uuid.UUID, document_id: uuid.UUID, title: str | None = None, file: UploadFile | None = None) -> Document | None:
        obj = await self.repo.get(org_id, document_id)
        if not obj:
            return None
        if title:
            obj.title = title
        old_key = None
        new_key = None
        if file is not None:
            data = await file.read()
            mime_type = file.content_type or "application/octet-stream"
            new_key, url = self._store(org_id, obj.patient_id, file.filename, mime_type, data)
            old_key = obj.storage_key
            obj.storage_key, obj.doc_link, obj.mime_type = new_key, url, mime_type
        try:
            await self.session.flush()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            if new_key:
                discard_objects(self.storage, [new_key])
            raise
        # the replaced object is only dropped once the row points at the new one
        if old_key:
            discard_objects(self.storage, [old_key])
        return obj

    async def remove(self, org_id: uuid.UUID, document_id: uuid.UUID) -> bool:
        obj = await self.repo.get(org_id, document_id)
        if not obj:
            return False
        key = obj.storage_key
        await self.repo.delete(obj)
        await self.session.commit()
        discard_objects(self.storage, [key])
        return True
