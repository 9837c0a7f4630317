# API Package - Centralized imports
# Allows easy importing of all routers

from .appointments import router as appointments_router
from .bills import router as bills_router
from .doctors import router as doctors_router
from .histories import router as histories_router
from .hospitals import router as hospitals_router
from .medications import router as medications_router
from .patients import router as patients_router
from .prescriptions import router as prescriptions_router

__all__ = [
    "appointments_router",
    "bills_router",
    "doctors_router",
    "histories_router",
    "hospitals_router",
    "medications_router",
    "patients_router",
    "prescriptions_router",
]
