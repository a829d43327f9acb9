from fastapi import APIRouter, Depends
from typing import Dict, Any
from studio.core.auth import get_current_admin
from studio.services.dashboard_service import get_dashboard_stats

router = APIRouter()

@router.get("/stats", response_model=Dict[str, Any])
async def read_stats(current_admin: dict = Depends(get_current_admin)):
    """
    Revenue, average ticket and most booked services (admin only)
    """
    return await get_dashboard_stats()
