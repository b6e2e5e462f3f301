import logging
import uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.platform.ports.object_storage import ObjectStoragePort
from app.platform.provider_registry import registry
from app.modules.documents.cleanup import discard_objects
from app.modules.documents.repository import DocumentRepository
from app.modules.persons.repository import PersonRepository
from app.modules.persons.schemas import PersonCreate
from app.modules.patients.models import Patient, Comorbidity, Medicine, School
from app.modules.patients.repository import PatientRepository, SchoolRepository, ComorbidityRepository
from app.modules.patients.schemas import (
    PatientCreate, PatientUpdate, PatientRemovalOut,
    SchoolCreate, ComorbidityCreate, MedicineCreate,
)

logger = logging.getLogger(__name__)

class OnboardingError(Exception):
    """Patient creation failed and was rolled back."""

    def __init__(self, message: str, *, conflict: bool = False):
        super().__init__(message)
        self.conflict = conflict

class PatientService:
    def __init__(self, session: AsyncSession, storage: ObjectStoragePort | None = None):
        self.session = session
        self.patients = PatientRepository(session)
        self.schools = SchoolRepository(session)
        self.comorbidities = ComorbidityRepository(session)
        self.persons = PersonRepository(session)
        self.documents = DocumentRepository(session)
        self._storage = storage

    @property
    def storage(self) -> ObjectStoragePort:
        return self._storage or registry.object_storage()

    # ---- Onboarding ----
    async def create(self, org_id: uuid.UUID, payload: PatientCreate) -> Patient:
        """
        Creates a patient together with its person, school, comorbidities,
        parents and medicines as one unit of work.

        Shared records (school by name, comorbidities by name, parents by
        national id) are reused when they already exist. Any failure rolls the
        whole transaction back and surfaces as a single OnboardingError.
        """
        try:
            person = await self.persons.create(org_id, **payload.person.model_dump())
            school = await self._resolve_school(org_id, payload.school)
            comorbidities = await self._resolve_comorbidities(org_id, payload.comorbidities)
            parents = await self._resolve_parents(org_id, payload.parents)

            patient = await self.patients.create(
                org_id,
                payment_plan=payload.payment_plan,
                psychologist_id=payload.psychologist_id,
                person=person,
                school=school,
                comorbidities=comorbidities,
                medicines=[],
                parents=[],
            )
            await self._add_medicines(org_id, patient, payload.medicines)
            patient.parents = parents
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Patient onboarding rolled back: {e}", exc_info=True)
            raise OnboardingError(f"Patient onboarding failed: {e}", conflict=isinstance(e, IntegrityError)) from e

        logger.info(
            f"Onboarded patient {patient.id} (school={school.id}, comorbidities={len(comorbidities)}, "
            f"medicines={len(patient.medicines)}, parents={len(parents)})"
        )
        return patient

    async def _resolve_school(self, org_id: uuid.UUID, payload: SchoolCreate) -> School:
        return await self.schools.find_or_create(org_id, **payload.model_dump())

    async def _resolve_comorbidities(self, org_id: uuid.UUID, payloads: list[ComorbidityCreate]) -> list[Comorbidity]:
        resolved: list[Comorbidity] = []
        for p in payloads:
            comorbidity = await self.comorbidities.find_or_create(org_id, p.name)
            if comorbidity not in resolved:
                resolved.append(comorbidity)
        return resolved

    async def _resolve_parents(self, org_id: uuid.UUID, payloads: list[PersonCreate]) -> list:
        parents = []
        for p in payloads:
            parent = await self.persons.find_or_create(org_id, **p.model_dump())
            if parent not in parents:
                parents.append(parent)
        return parents

    async def _add_medicines(self, org_id: uuid.UUID, patient: Patient, payloads: list[MedicineCreate]) -> list[Medicine]:
        return [await self.patients.add_medicine(org_id, patient, **p.model_dump()) for p in payloads]

    # ---- Reads ----
    async def get(self, org_id: uuid.UUID, patient_id: uuid.UUID) -> Patient | None:
        return await self.patients.get(org_id, patient_id)

    async def list_patients(self, org_id: uuid.UUID, limit: int = 50, offset: int = 0):
        return await self.patients.list(org_id, limit, offset)

    # ---- Updates ----
    async def add_comorbidities(self, org_id: uuid.UUID, patient_id: uuid.UUID, payloads: list[ComorbidityCreate]) -> Patient | None:
        patient = await self.patients.get(org_id, patient_id)
        if not patient:
            return None
        for comorbidity in await self._resolve_comorbidities(org_id, payloads):
            if comorbidity not in patient.comorbidities:
                patient.comorbidities.append(comorbidity)
        await self.session.commit()
        return patient

    async def add_medicines(self, org_id: uuid.UUID, patient_id: uuid.UUID, payloads: list[MedicineCreate]) -> Patient | None:
        patient = await self.patients.get(org_id, patient_id)
        if not patient:
            return None
        await self._add_medicines(org_id, patient, payloads)
        await self.session.commit()
        return patient

    async def update(self, org_id: uuid.UUID, patient_id: uuid.UUID, payload: PatientUpdate) -> Patient | None:
        data = payload.model_dump(exclude_unset=True, exclude={"person"})
        patient = await self.patients.update(org_id, patient_id, **data)
        if not patient:
            return None
        if payload.person is not None:
            await self.persons.update(org_id, patient.person_id, **payload.person.model_dump(exclude_unset=True))
        await self.session.commit()
        return patient

    async def update_school(self, org_id: uuid.UUID, patient_id: uuid.UUID, payload: SchoolCreate) -> Patient | None:
        patient = await self.patients.get(org_id, patient_id)
        if not patient:
            return None
        patient.school = await self._resolve_school(org_id, payload)
        await self.session.commit()
        return patient

    # ---- Removal ----
    async def remove(self, org_id: uuid.UUID, patient_id: uuid.UUID) -> PatientRemovalOut | None:
        patient = await self.patients.get(org_id, patient_id)
        if not patient:
            return None
        documents = await self.documents.list_for_patient(org_id, patient_id)
        keys = [d.storage_key for d in documents]
        for d in documents:
            await self.documents.delete(d)
        await self.patients.delete_with_person(patient)
        await self.session.commit()

        failures = discard_objects(self.storage, keys)
        if failures:
            logger.warning(f"Patient {patient_id} removed; {len(failures)} of {len(keys)} stored document(s) left behind")
        else:
            logger.info(f"Patient {patient_id} removed with {len(keys)} stored document(s)")
        return PatientRemovalOut(patient_id=patient_id, documents_removed=len(keys), cleanup_failures=failures)

    async def remove_medicine(self, org_id: uuid.UUID, patient_id: uuid.UUID, medicine_id: uuid.UUID) -> bool:
        patient = await self.patients.get(org_id, patient_id)
        if not patient:
            return False
        medicine = next((m for m in patient.medicines if m.id == medicine_id), None)
        if not medicine:
            return False
        # delete-orphan removes the row
        patient.medicines.remove(medicine)
        await self.session.commit()
        return True
