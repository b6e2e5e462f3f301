import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_accepts_async_drivers():
    assert Settings(DATABASE_URL="postgresql+asyncpg://u:p@db/clinic").DATABASE_URL.endswith("/clinic")
    assert Settings(DATABASE_URL="sqlite+aiosqlite:///./dev.db").DATABASE_URL.startswith("sqlite+aiosqlite")


def test_rejects_sync_driver():
    with pytest.raises(ValidationError):
        Settings(DATABASE_URL="postgresql://u:p@db/clinic")


def test_upload_defaults():
    s = Settings()

    assert s.MAX_UPLOAD_BYTES == 25 * 1024 * 1024
    assert s.OBJECT_STORAGE_PROVIDER == "local"
