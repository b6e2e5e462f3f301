import uuid
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.documents.schemas import DocumentOut, PsychologistDocumentOut, DownloadOut
from app.modules.documents.service import DocumentService, DocumentStorageError

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> DocumentService:
    return DocumentService(session)

def _check_size(*files: UploadFile):
    for f in files:
        if f.size is not None and f.size > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=f"File too large: {f.filename}")

@router.post("/patients/{patient_id}", response_model=DocumentOut, status_code=201, dependencies=[Depends(require_scopes("documents:write"))])
async def upload_document(
    patient_id: uuid.UUID,
    title: str = Form(..., min_length=1, max_length=255),
    file: UploadFile = File(...),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(svc),
):
    _check_size(file)
    try:
        obj = await service.create(principal.org_id, patient_id, title, file)
    except DocumentStorageError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return obj

@router.post("/patients/{patient_id}/follow-ups", response_model=list[DocumentOut], status_code=201, dependencies=[Depends(require_scopes("documents:write"))])
async def upload_follow_ups(
    patient_id: uuid.UUID,
    files: list[UploadFile] = File(...),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(svc),
):
    _check_size(*files)
    try:
        docs = await service.create_follow_ups(principal.org_id, patient_id, files)
    except DocumentStorageError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    if docs is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return docs

@router.get("/patients/{patient_id}", response_model=list[DocumentOut], dependencies=[Depends(require_scopes("documents:read"))])
async def list_patient_documents(
    patient_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(svc),
):
    return await service.list_for_patient(principal.org_id, patient_id)

@router.get("/psychologists/{psychologist_id}", response_model=list[PsychologistDocumentOut], dependencies=[Depends(require_scopes("documents:read"))])
async def list_psychologist_documents(
    psychologist_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(svc),
):
    return await service.list_for_psychologist(principal.org_id, psychologist_id)

@router.get("/{document_id}", response_model=DocumentOut, dependencies=[Depends(require_scopes("documents:read"))])
async def get_document(
    document_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(svc),
):
    obj = await service.get(principal.org_id, document_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return obj

@router.get("/{document_id}/download", response_model=DownloadOut, dependencies=[Depends(require_scopes("documents:read"))])
async def download_document(
    document_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(svc),
):
    out = await service.download_url(principal.org_id, document_id)
    if not out:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return out

@router.patch("/{document_id}", response_model=DocumentOut, dependencies=[Depends(require_scopes("documents:write"))])
async def update_document(
    document_id: uuid.UUID,
    title: str | None = Form(default=None, max_length=255),
    file: UploadFile | None = File(default=None),
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(svc),
):
    if file is not None:
        _check_size(file)
    try:
        obj = await service.update(principal.org_id, document_id, title=title, file=file)
    except DocumentStorageError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return obj

@router.delete("/{document_id}", status_code=204, dependencies=[Depends(require_scopes("documents:write"))])
async def delete_document(
    document_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: DocumentService = Depends(svc),
):
    ok = await service.remove(principal.org_id, document_id)
    if not ok:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return
