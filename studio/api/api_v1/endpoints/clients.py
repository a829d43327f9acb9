from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Dict, Any
from studio.core.auth import get_current_admin
from studio.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from studio.services.client_service import (
    WhatsappTakenError, get_clients, get_client_by_id, create_client, update_client, delete_client
)

router = APIRouter()

@router.get("/", response_model=List[ClientResponse])
async def list_clients(current_admin: dict = Depends(get_current_admin)):
    """
    Get all clients with their completed spend (admin only)
    """
    return await get_clients()

@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def add_client(
    client_in: ClientCreate,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Register a client manually (admin only)
    """
    client = await create_client(client_in)
    if not client:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A client with this WhatsApp number already exists"
        )
    return client

@router.get("/{client_id}", response_model=ClientResponse)
async def read_client(
    client_id: str,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Get a client (admin only)
    """
    client = await get_client_by_id(client_id)
    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return client

@router.put("/{client_id}", response_model=ClientResponse)
async def edit_client(
    client_id: str,
    client_update: ClientUpdate,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Update a client (admin only)
    """
    try:
        client = await update_client(client_id, client_update)
    except WhatsappTakenError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A client with this WhatsApp number already exists"
        )

    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return client

@router.delete("/{client_id}", response_model=Dict[str, Any])
async def remove_client(
    client_id: str,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Delete a client (admin only)
    """
    success = await delete_client(client_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return {"message": "Client deleted successfully"}
