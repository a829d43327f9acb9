from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, Dict, List
from studio.core.auth import get_current_admin
from studio.schemas.block import AgendaBlock, AgendaBlockCreate
from studio.services.schedule_service import get_blocks, add_block, delete_block

router = APIRouter()

@router.get("/", response_model=List[AgendaBlock])
async def read_blocks():
    """
    Get the date ranges in which the agenda is closed
    """
    return await get_blocks()

@router.post("/", response_model=AgendaBlock, status_code=status.HTTP_201_CREATED)
async def create_block(
    block_in: AgendaBlockCreate,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Close the agenda for a date range (admin only)
    """
    return await add_block(block_in)

@router.delete("/{block_id}", response_model=Dict[str, Any])
async def remove_block(
    block_id: str,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Reopen the agenda by deleting a block (admin only)
    """
    success = await delete_block(block_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Block not found"
        )

    return {"message": "Block removed successfully"}
