import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import (
    appointments_router,
    bills_router,
    doctors_router,
    histories_router,
    hospitals_router,
    medications_router,
    patients_router,
    prescriptions_router,
)
from .config import settings
from .database import init_db
from .exceptions import register_exception_handlers

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format=settings.log_format,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    logger.info("Starting MyDocAppointment API...")
    init_db()
    yield
    logger.info("MyDocAppointment API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(appointments_router)
    app.include_router(bills_router)
    app.include_router(doctors_router)
    app.include_router(histories_router)
    app.include_router(hospitals_router)
    app.include_router(medications_router)
    app.include_router(patients_router)
    app.include_router(prescriptions_router)

    @app.get("/")
    async def root():
        return {
            "message": "MyDocAppointment API",
            "status": "running",
            "version": settings.api_version,
            "endpoints": {
                "appointments": "/v1/api/appointments",
                "bills": "/v1/api/bills",
                "doctors": "/v1/api/doctors",
                "histories": "/v1/api/histories",
                "hospitals": "/v1/api/hospitals",
                "medications": "/v1/api/medications",
                "patients": "/v1/api/patients",
                "prescriptions": "/v1/api/prescriptions",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("mydoc_api.main:app", host=settings.app_host, port=settings.app_port, reload=True)
