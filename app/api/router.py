from fastapi import APIRouter
from app.modules.patients.router import router as patients_router
from app.modules.persons.router import router as persons_router
from app.modules.psychologists.router import router as psychologists_router
from app.modules.documents.router import router as documents_router

api_router = APIRouter()
api_router.include_router(patients_router, prefix="/patients", tags=["patients"])
api_router.include_router(persons_router, prefix="/persons", tags=["persons"])
api_router.include_router(documents_router, prefix="/documents", tags=["documents"])
api_router.include_router(psychologists_router, tags=["psychologists"])
# psychologists_router already includes /psychologists and /agendas

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
