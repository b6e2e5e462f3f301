import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, ForeignKey
from app.core.base import Base, TimestampedTenantMixin

class Document(Base, TimestampedTenantMixin):
    patient_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patient.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    # The "storage_key" is the object key relative to the storage provider; doc_link is its URL.
    storage_key: Mapped[str] = mapped_column(String(512))
    doc_link: Mapped[str] = mapped_column(String(1024))
    mime_type: Mapped[str] = mapped_column(String(128), default="application/octet-stream")
