from fastapi import APIRouter
from studio.api.api_v1.endpoints import (
    auth, profile, hours, blocks, services, clients, appointments, availability, dashboard
)

router = APIRouter()

# Include all routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(profile.router, prefix="/profile", tags=["Studio Profile"])
router.include_router(hours.router, prefix="/hours", tags=["Operating Hours"])
router.include_router(blocks.router, prefix="/blocks", tags=["Agenda Blocks"])
router.include_router(services.router, prefix="/services", tags=["Services"])
router.include_router(clients.router, prefix="/clients", tags=["Clients"])
router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
router.include_router(availability.router, prefix="/availability", tags=["Availability"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
