from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Dict, Any
from studio.core.auth import get_current_admin
from studio.schemas.service import ServiceCreate, ServiceUpdate, ServiceResponse
from studio.services.catalog_service import (
    get_services, get_service_by_id, create_service, update_service, delete_service
)

router = APIRouter()

@router.get("/", response_model=List[ServiceResponse])
async def list_services():
    """
    Get the studio's service catalog
    """
    return await get_services()

@router.get("/{service_id}", response_model=ServiceResponse)
async def read_service(service_id: str):
    """
    Get a single service
    """
    service = await get_service_by_id(service_id)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return service

@router.post("/", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def add_service(
    service_in: ServiceCreate,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Add a service to the catalog (admin only)
    """
    return await create_service(service_in)

@router.put("/{service_id}", response_model=ServiceResponse)
async def edit_service(
    service_id: str,
    service_update: ServiceUpdate,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Update a service (admin only)
    """
    service = await update_service(service_id, service_update)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return service

@router.delete("/{service_id}", response_model=Dict[str, Any])
async def remove_service(
    service_id: str,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Remove a service from the catalog (admin only)
    """
    success = await delete_service(service_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return {"message": "Service deleted successfully"}
