import uuid
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.patients.schemas import (
    PatientCreate, PatientUpdate, PatientOut, PatientRemovalOut,
    SchoolCreate, ComorbidityCreate, MedicineCreate,
)
from app.modules.patients.service import PatientService, OnboardingError

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> PatientService:
    return PatientService(session)

@router.post("", response_model=PatientOut, status_code=201, dependencies=[Depends(require_scopes("patients:write"))])
async def create_patient(
    payload: PatientCreate,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    try:
        return await service.create(principal.org_id, payload)
    except OnboardingError as e:
        code = status.HTTP_409_CONFLICT if e.conflict else status.HTTP_500_INTERNAL_SERVER_ERROR
        raise HTTPException(status_code=code, detail=str(e))

@router.get("/{patient_id}", response_model=PatientOut, dependencies=[Depends(require_scopes("patients:read"))])
async def get_patient(
    patient_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    obj = await service.get(principal.org_id, patient_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return obj

@router.get("", response_model=list[PatientOut], dependencies=[Depends(require_scopes("patients:read"))])
async def list_patients(
    limit: int = 50, offset: int = 0,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    return await service.list_patients(principal.org_id, limit, offset)

@router.patch("/{patient_id}", response_model=PatientOut, dependencies=[Depends(require_scopes("patients:write"))])
async def update_patient(
    patient_id: uuid.UUID,
    payload: PatientUpdate,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    obj = await service.update(principal.org_id, patient_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Patient not found")
    return obj

@router.put("/{patient_id}/school", response_model=PatientOut, dependencies=[Depends(require_scopes("patients:write"))])
async def update_patient_school(
    patient_id: uuid.UUID,
    payload: SchoolCreate,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    obj = await service.update_school(principal.org_id, patient_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Patient not found")
    return obj

@router.post("/{patient_id}/comorbidities", response_model=PatientOut, dependencies=[Depends(require_scopes("patients:write"))])
async def add_patient_comorbidities(
    patient_id: uuid.UUID,
    payload: list[ComorbidityCreate],
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    obj = await service.add_comorbidities(principal.org_id, patient_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Patient not found")
    return obj

@router.post("/{patient_id}/medicines", response_model=PatientOut, dependencies=[Depends(require_scopes("patients:write"))])
async def add_patient_medicines(
    patient_id: uuid.UUID,
    payload: list[MedicineCreate],
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    obj = await service.add_medicines(principal.org_id, patient_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Patient not found")
    return obj

@router.delete("/{patient_id}/medicines/{medicine_id}", status_code=204, dependencies=[Depends(require_scopes("patients:write"))])
async def delete_patient_medicine(
    patient_id: uuid.UUID,
    medicine_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    ok = await service.remove_medicine(principal.org_id, patient_id, medicine_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Medicine not found")
    return

@router.delete("/{patient_id}", response_model=PatientRemovalOut, dependencies=[Depends(require_scopes("patients:write"))])
async def delete_patient(
    patient_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    out = await service.remove(principal.org_id, patient_id)
    if not out:
        raise HTTPException(status_code=404, detail="Patient not found")
    return out
