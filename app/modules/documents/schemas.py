import uuid
from pydantic import BaseModel

class DocumentOut(BaseModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    title: str
    doc_link: str
    mime_type: str

    class Config:
        from_attributes = True

class PsychologistDocumentOut(BaseModel):
    id: uuid.UUID
    title: str
    doc_link: str
    patient_id: uuid.UUID
    patient_name: str

class DownloadOut(BaseModel):
    id: uuid.UUID
    download_url: str
    expires_in: int
