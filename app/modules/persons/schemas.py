import uuid
from datetime import date
from pydantic import BaseModel, Field

class AddressIn(BaseModel):
    zip_code: str = Field(..., max_length=16)
    state: str = Field(..., max_length=64)
    city: str = Field(..., max_length=120)
    district: str | None = None
    street: str = Field(..., max_length=200)
    home_number: int | None = None
    complement: str | None = None

class PersonCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    birthdate: date | None = None
    national_id: str = Field(..., min_length=1, max_length=32)
    rg: str | None = None
    phone: str | None = None
    address: AddressIn | None = None

class PersonUpdate(BaseModel):
    name: str | None = None
    birthdate: date | None = None
    rg: str | None = None
    phone: str | None = None
    address: AddressIn | None = None

class PersonOut(BaseModel):
    id: uuid.UUID
    name: str
    birthdate: date | None
    national_id: str
    rg: str | None
    phone: str | None
    address: dict | None

    class Config:
        from_attributes = True
