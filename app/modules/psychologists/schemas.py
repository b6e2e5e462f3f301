import uuid
from pydantic import BaseModel, EmailStr, Field

class PsychologistCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    license_number: str = Field(..., min_length=1, max_length=32)
    email: EmailStr | None = None
    phone: str | None = None

class PsychologistUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None

class PsychologistOut(BaseModel):
    id: uuid.UUID
    name: str
    license_number: str
    email: str | None
    phone: str | None

    class Config:
        from_attributes = True

class AvailableTimeIn(BaseModel):
    start_time: str = Field(..., max_length=8)
    end_time: str = Field(..., max_length=8)

class DayAgendaIn(BaseModel):
    weekday: int = Field(ge=0, le=6)
    available_times: list[AvailableTimeIn] = Field(..., min_length=1)

class AgendaCreate(BaseModel):
    psychologist_id: uuid.UUID
    agendas: list[DayAgendaIn] = Field(..., min_length=1)

class AgendaReplace(BaseModel):
    agendas: list[DayAgendaIn] = Field(..., min_length=1)

class AvailableTimeOut(BaseModel):
    id: uuid.UUID
    start_time: str
    end_time: str

    class Config:
        from_attributes = True

class AgendaOut(BaseModel):
    id: uuid.UUID
    psychologist_id: uuid.UUID
    weekday: int
    available_times: list[AvailableTimeOut]

    class Config:
        from_attributes = True
