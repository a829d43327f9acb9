from fastapi import APIRouter, Depends
from studio.core.auth import get_current_admin
from studio.schemas.profile import StudioProfile, StudioProfileUpdate
from studio.services.profile_service import get_profile, update_profile

router = APIRouter()

@router.get("/", response_model=StudioProfile)
async def read_profile():
    """
    Get the studio's public profile
    """
    return await get_profile()

@router.put("/", response_model=StudioProfile)
async def update_studio_profile(
    profile_update: StudioProfileUpdate,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Update the studio profile (admin only)
    """
    return await update_profile(profile_update)
