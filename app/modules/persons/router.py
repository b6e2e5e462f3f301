import uuid
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.persons.schemas import PersonUpdate, PersonOut
from app.modules.persons.service import PersonService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> PersonService:
    return PersonService(session)

@router.get("", response_model=PersonOut, dependencies=[Depends(require_scopes("patients:read"))])
async def get_person_by_national_id(
    national_id: str,
    principal: Principal = Depends(get_principal),
    service: PersonService = Depends(svc),
):
    obj = await service.get_by_national_id(principal.org_id, national_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Person not found")
    return obj

@router.get("/{person_id}", response_model=PersonOut, dependencies=[Depends(require_scopes("patients:read"))])
async def get_person(
    person_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: PersonService = Depends(svc),
):
    obj = await service.get(principal.org_id, person_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Person not found")
    return obj

@router.patch("/{person_id}", response_model=PersonOut, dependencies=[Depends(require_scopes("patients:write"))])
async def update_person(
    person_id: uuid.UUID,
    payload: PersonUpdate,
    principal: Principal = Depends(get_principal),
    service: PersonService = Depends(svc),
):
    obj = await service.update(principal.org_id, person_id, payload)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Person not found")
    return obj
