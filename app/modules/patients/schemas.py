import uuid
from pydantic import BaseModel, Field
from app.modules.persons.schemas import AddressIn, PersonCreate, PersonUpdate, PersonOut

PAYMENT_PLAN_PATTERN = "^(monthly|bimonthly|quarterly|semiannual|annual)$"

class SchoolCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    tax_id: str | None = Field(default=None, max_length=32)
    phone: str | None = None
    address: AddressIn | None = None

class SchoolOut(BaseModel):
    id: uuid.UUID
    name: str
    tax_id: str | None
    phone: str | None
    address: dict | None

    class Config:
        from_attributes = True

class ComorbidityCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=160)

class ComorbidityOut(BaseModel):
    id: uuid.UUID
    name: str

    class Config:
        from_attributes = True

class MedicineCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=160)
    dosage: str | None = None
    schedule: str | None = None

class MedicineOut(MedicineCreate):
    id: uuid.UUID
    patient_id: uuid.UUID

    class Config:
        from_attributes = True

class PatientCreate(BaseModel):
    payment_plan: str = Field(..., pattern=PAYMENT_PLAN_PATTERN)
    psychologist_id: uuid.UUID | None = None
    person: PersonCreate
    school: SchoolCreate
    comorbidities: list[ComorbidityCreate] = []
    medicines: list[MedicineCreate] = []
    parents: list[PersonCreate] = []

class PatientUpdate(BaseModel):
    payment_plan: str | None = Field(default=None, pattern=PAYMENT_PLAN_PATTERN)
    psychologist_id: uuid.UUID | None = None
    person: PersonUpdate | None = None

class PatientOut(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID
    payment_plan: str
    psychologist_id: uuid.UUID | None
    person: PersonOut
    school: SchoolOut
    comorbidities: list[ComorbidityOut]
    medicines: list[MedicineOut]
    parents: list[PersonOut]

    class Config:
        from_attributes = True

class PatientRemovalOut(BaseModel):
    patient_id: uuid.UUID
    documents_removed: int
    cleanup_failures: list[str] = []
