"""
Shared pytest fixtures.

Service tests run against a real async SQLAlchemy engine backed by a
temporary SQLite file; storage is replaced by an in-memory double so upload
and delete failures can be injected.
"""

import os
import uuid
from io import BytesIO
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from starlette.datastructures import Headers

# Ensure test environment before app settings are read
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./.pytest-psiclinic.db"
os.environ["OBJECT_STORAGE_PROVIDER"] = "local"

from app.core.base import Base  # noqa: E402
from app.modules.persons import models as _persons  # noqa: E402,F401
from app.modules.patients import models as _patients  # noqa: E402,F401
from app.modules.psychologists import models as _psychologists  # noqa: E402,F401
from app.modules.documents import models as _documents  # noqa: E402,F401


class FakeStorage:
    """In-memory object store; puts past ``fail_put_after`` and keys in ``fail_delete`` raise."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_put_after: int | None = None
        self.fail_delete: set[str] = set()

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        if self.fail_put_after is not None and len(self.objects) >= self.fail_put_after:
            raise RuntimeError("storage unavailable")
        self.objects[key] = data

    def object_url(self, key: str) -> str:
        return f"https://files.test/{key}"

    def presign_download(self, key: str, expires_seconds: int = 900) -> str:
        return f"https://files.test/{key}?expires={expires_seconds}"

    def delete(self, key: str) -> None:
        if key in self.fail_delete:
            raise RuntimeError(f"cannot delete {key}")
        self.objects.pop(key, None)
        self.deleted.append(key)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Create a throwaway database with every table."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def org_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def make_upload():
    def _make(filename: str, data: bytes = b"%PDF-1.4 test", content_type: str = "application/pdf") -> UploadFile:
        return UploadFile(
            file=BytesIO(data),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )
    return _make


@pytest.fixture
def patient_payload():
    """Build a patient onboarding payload as a plain dict."""
    def _build(national_id: str = "123.456.789-00", school: str = "Escola Ativa Idade", **overrides) -> dict:
        payload = {
            "payment_plan": "monthly",
            "person": {
                "name": "Ana Souza",
                "birthdate": "2014-03-02",
                "national_id": national_id,
                "phone": "+55 71 99999-0000",
                "address": {
                    "zip_code": "40000-000",
                    "state": "BA",
                    "city": "Salvador",
                    "district": "Centro",
                    "street": "Rua das Flores",
                    "home_number": 10,
                },
            },
            "school": {"name": school, "tax_id": "00.000.000/0001-00"},
            "comorbidities": [{"name": "ADHD"}],
            "medicines": [{"name": "Methylphenidate", "dosage": "10mg", "schedule": "mornings"}],
            "parents": [{"name": "Carla Souza", "national_id": "987.654.321-00"}],
        }
        payload.update(overrides)
        return payload
    return _build
