import uuid
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.psychologists.schemas import (
    PsychologistCreate, PsychologistUpdate, PsychologistOut,
    AgendaCreate, AgendaReplace, AgendaOut,
)
from app.modules.psychologists.service import PsychologistService, AgendaService
from app.modules.psychologists.validation import AgendaValidationError

router = APIRouter()

def psychologist_svc(s: AsyncSession = Depends(get_session)) -> PsychologistService:
    return PsychologistService(s)

def agenda_svc(s: AsyncSession = Depends(get_session)) -> AgendaService:
    return AgendaService(s)

# Psychologists
@router.post("/psychologists", response_model=PsychologistOut, status_code=201, dependencies=[Depends(require_scopes("psychologists:write"))])
async def create_psychologist(payload: PsychologistCreate, principal: Principal = Depends(get_principal), service: PsychologistService = Depends(psychologist_svc)):
    return await service.create(principal.org_id, payload)

@router.get("/psychologists", response_model=list[PsychologistOut], dependencies=[Depends(require_scopes("psychologists:read"))])
async def list_psychologists(principal: Principal = Depends(get_principal), service: PsychologistService = Depends(psychologist_svc)):
    return await service.list_psychologists(principal.org_id)

@router.get("/psychologists/{psychologist_id}", response_model=PsychologistOut, dependencies=[Depends(require_scopes("psychologists:read"))])
async def get_psychologist(psychologist_id: uuid.UUID, principal: Principal = Depends(get_principal), service: PsychologistService = Depends(psychologist_svc)):
    obj = await service.get(principal.org_id, psychologist_id)
    if not obj: raise HTTPException(status.HTTP_404_NOT_FOUND, "Psychologist not found")
    return obj

@router.patch("/psychologists/{psychologist_id}", response_model=PsychologistOut, dependencies=[Depends(require_scopes("psychologists:write"))])
async def update_psychologist(psychologist_id: uuid.UUID, payload: PsychologistUpdate, principal: Principal = Depends(get_principal), service: PsychologistService = Depends(psychologist_svc)):
    obj = await service.update(principal.org_id, psychologist_id, payload)
    if not obj: raise HTTPException(status.HTTP_404_NOT_FOUND, "Psychologist not found")
    return obj

@router.delete("/psychologists/{psychologist_id}", status_code=204, dependencies=[Depends(require_scopes("psychologists:write"))])
async def delete_psychologist(psychologist_id: uuid.UUID, principal: Principal = Depends(get_principal), service: PsychologistService = Depends(psychologist_svc)):
    if not await service.remove(principal.org_id, psychologist_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Psychologist not found")

# Agendas
@router.post("/agendas", response_model=list[AgendaOut], status_code=201, dependencies=[Depends(require_scopes("agendas:write"))])
async def create_agendas(payload: AgendaCreate, principal: Principal = Depends(get_principal), service: AgendaService = Depends(agenda_svc)):
    try:
        created = await service.create(principal.org_id, payload.psychologist_id, payload.agendas)
    except AgendaValidationError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e))
    if created is None: raise HTTPException(status.HTTP_404_NOT_FOUND, "Psychologist not found")
    return created

@router.get("/agendas", response_model=list[AgendaOut], dependencies=[Depends(require_scopes("agendas:read"))])
async def list_agendas(principal: Principal = Depends(get_principal), service: AgendaService = Depends(agenda_svc)):
    return await service.list_agendas(principal.org_id)

@router.get("/agendas/psychologists/{psychologist_id}", response_model=list[AgendaOut], dependencies=[Depends(require_scopes("agendas:read"))])
async def list_psychologist_agendas(psychologist_id: uuid.UUID, principal: Principal = Depends(get_principal), service: AgendaService = Depends(agenda_svc)):
    return await service.list_for_psychologist(principal.org_id, psychologist_id)

@router.put("/agendas/psychologists/{psychologist_id}", response_model=list[AgendaOut], dependencies=[Depends(require_scopes("agendas:write"))])
async def replace_psychologist_agendas(psychologist_id: uuid.UUID, payload: AgendaReplace, principal: Principal = Depends(get_principal), service: AgendaService = Depends(agenda_svc)):
    try:
        replaced = await service.replace(principal.org_id, psychologist_id, payload.agendas)
    except AgendaValidationError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e))
    if replaced is None: raise HTTPException(status.HTTP_404_NOT_FOUND, "Psychologist not found")
    return replaced

@router.delete("/agendas/{agenda_id}", status_code=204, dependencies=[Depends(require_scopes("agendas:write"))])
async def delete_agenda(agenda_id: uuid.UUID, principal: Principal = Depends(get_principal), service: AgendaService = Depends(agenda_svc)):
    if not await service.remove(principal.org_id, agenda_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Agenda not found")
