"""
HTTP-level tests: status code mapping, validation and auth.

Services are swapped through ``app.dependency_overrides`` so no database is
touched; the startup hook never runs because the client is not used as a
context manager.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.main import app
from app.modules.documents import router as documents_router
from app.modules.documents.service import DocumentStorageError
from app.modules.patients import router as patients_router
from app.modules.patients.schemas import PatientRemovalOut
from app.modules.patients.service import OnboardingError
from app.modules.psychologists import router as psychologists_router
from app.modules.psychologists.service import AgendaService

API = settings.API_PREFIX


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def patient_service():
    service = MagicMock()
    app.dependency_overrides[patients_router.svc] = lambda: service
    return service


@pytest.fixture
def document_service():
    service = MagicMock()
    app.dependency_overrides[documents_router.svc] = lambda: service
    return service


def bearer(scopes: list[str]) -> dict:
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "org_id": str(uuid.uuid4()), "scopes": scopes},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )
    return {"Authorization": f"Bearer {token}"}


class TestHealth:
    def test_health(self, client):
        response = client.get(f"{API}/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestPatientEndpoints:
    def test_onboarding_conflict_maps_to_409(self, client, patient_service, patient_payload):
        patient_service.create = AsyncMock(side_effect=OnboardingError("duplicate national id", conflict=True))

        response = client.post(f"{API}/patients", json=patient_payload())

        assert response.status_code == 409
        assert "duplicate national id" in response.json()["detail"]

    def test_onboarding_failure_maps_to_500(self, client, patient_service, patient_payload):
        patient_service.create = AsyncMock(side_effect=OnboardingError("database unavailable"))

        response = client.post(f"{API}/patients", json=patient_payload())

        assert response.status_code == 500

    def test_unknown_payment_plan_is_rejected(self, client, patient_service, patient_payload):
        patient_service.create = AsyncMock()

        response = client.post(f"{API}/patients", json=patient_payload(payment_plan="weekly"))

        assert response.status_code == 422
        patient_service.create.assert_not_called()

    def test_missing_patient_is_404(self, client, patient_service):
        patient_service.get = AsyncMock(return_value=None)

        response = client.get(f"{API}/patients/{uuid.uuid4()}")

        assert response.status_code == 404

    def test_delete_returns_removal_report(self, client, patient_service):
        patient_id = uuid.uuid4()
        patient_service.remove = AsyncMock(return_value=PatientRemovalOut(
            patient_id=patient_id, documents_removed=2, cleanup_failures=["documents/a.pdf"],
        ))

        response = client.delete(f"{API}/patients/{patient_id}")

        assert response.status_code == 200
        assert response.json() == {
            "patient_id": str(patient_id),
            "documents_removed": 2,
            "cleanup_failures": ["documents/a.pdf"],
        }


class TestAgendaEndpoints:
    @pytest.fixture
    def mock_session(self):
        session = AsyncMock(spec=AsyncSession)
        app.dependency_overrides[psychologists_router.agenda_svc] = lambda: AgendaService(session)
        return session

    def test_overlapping_windows_are_rejected(self, client, mock_session):
        response = client.post(f"{API}/agendas", json={
            "psychologist_id": str(uuid.uuid4()),
            "agendas": [{"weekday": 1, "available_times": [
                {"start_time": "09:00", "end_time": "10:00"},
                {"start_time": "09:30", "end_time": "11:00"},
            ]}],
        })

        assert response.status_code == 400
        assert response.json()["detail"].startswith("agendas[0].available_times[1]")
        mock_session.commit.assert_not_called()

    def test_weekday_out_of_range_is_rejected(self, client, mock_session):
        response = client.put(f"{API}/agendas/psychologists/{uuid.uuid4()}", json={
            "agendas": [{"weekday": 7, "available_times": [{"start_time": "09:00", "end_time": "10:00"}]}],
        })

        assert response.status_code == 422


class TestDocumentEndpoints:
    def test_storage_failure_maps_to_502(self, client, document_service):
        document_service.create = AsyncMock(side_effect=DocumentStorageError("bucket unreachable"))

        response = client.post(
            f"{API}/documents/patients/{uuid.uuid4()}",
            data={"title": "Report"},
            files={"file": ("report.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 502

    def test_oversized_upload_is_rejected(self, client, document_service, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 3)
        document_service.create = AsyncMock()

        response = client.post(
            f"{API}/documents/patients/{uuid.uuid4()}",
            data={"title": "Report"},
            files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 413
        document_service.create.assert_not_called()

    def test_missing_document_download_is_404(self, client, document_service):
        document_service.download_url = AsyncMock(return_value=None)

        response = client.get(f"{API}/documents/{uuid.uuid4()}/download")

        assert response.status_code == 404


class TestAuth:
    def test_missing_scope_is_forbidden(self, client, patient_service, patient_payload):
        patient_service.create = AsyncMock()

        response = client.post(f"{API}/patients", json=patient_payload(), headers=bearer(["patients:read"]))

        assert response.status_code == 403
        patient_service.create.assert_not_called()

    def test_invalid_token_is_unauthorized(self, client, patient_service):
        patient_service.get = AsyncMock()

        response = client.get(f"{API}/patients/{uuid.uuid4()}", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401


class TestUnhandledErrors:
    def test_unexpected_exception_returns_generic_500(self, patient_service):
        patient_service.get = AsyncMock(side_effect=RuntimeError("boom"))
        client = TestClient(app, raise_server_exceptions=False)
        try:
            response = client.get(f"{API}/patients/{uuid.uuid4()}")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"message": "An internal server error occurred."}
