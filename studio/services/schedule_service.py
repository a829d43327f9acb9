from typing import Dict, Any, List, Optional
from studio.db.mongodb import db
from studio.schemas.hours import OperatingHours
from studio.schemas.block import AgendaBlock, AgendaBlockCreate
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError
import logging

logger = logging.getLogger(__name__)

def _block_from_doc(doc: Dict[str, Any]) -> Optional[AgendaBlock]:
    try:
        return AgendaBlock(
            id=str(doc["_id"]),
            startDate=doc["startDate"],
            endDate=doc["endDate"],
            reason=doc.get("reason") or "",
            createdAt=doc.get("createdAt")
        )
    except (KeyError, ValidationError, ValueError) as e:
        logger.warning(f"Skipping unreadable agenda block {doc.get('_id')}: {e}")
        return None

async def get_operating_hours() -> List[OperatingHours]:
    """
    Get the weekly operating hours, ordered by day of week
    """
    cursor = db.db.operating_hours.find({}).sort("dayOfWeek", 1)
    docs = await cursor.to_list(length=7)

    hours = []
    for doc in docs:
        try:
            hours.append(OperatingHours(
                dayOfWeek=doc["dayOfWeek"],
                isOpen=doc.get("isOpen", False),
                slots=doc.get("slots") or []
            ))
        except (KeyError, ValidationError) as e:
            logger.warning(f"Skipping unreadable operating hours {doc.get('_id')}: {e}")
    return hours

async def update_operating_hours(hours: List[OperatingHours]) -> List[OperatingHours]:
    """
    Upsert one document per weekday; days not sent are left untouched
    """
    for entry in hours:
        await db.db.operating_hours.update_one(
            {"dayOfWeek": entry.dayOfWeek},
            {"$set": {
                "isOpen": entry.isOpen,
                "slots": [slot.dict() for slot in entry.slots],
                "updatedAt": datetime.utcnow()
            }},
            upsert=True
        )

    return await get_operating_hours()

async def get_blocks() -> List[AgendaBlock]:
    """
    Get all agenda blocks, most recent start first
    """
    cursor = db.db.agenda_blocks.find({}).sort("startDate", -1)
    docs = await cursor.to_list(length=None)
    return [block for block in (_block_from_doc(doc) for doc in docs) if block]

async def add_block(block_in: AgendaBlockCreate) -> AgendaBlock:
    """
    Add an agenda block
    """
    block_data = block_in.dict()
    block_data["createdAt"] = datetime.utcnow()

    result = await db.db.agenda_blocks.insert_one(block_data)
    created_block = await db.db.agenda_blocks.find_one({"_id": result.inserted_id})
    return _block_from_doc(created_block)

async def delete_block(block_id: str) -> bool:
    """
    Delete an agenda block
    """
    try:
        object_id = ObjectId(block_id)
    except (InvalidId, TypeError):
        return False

    result = await db.db.agenda_blocks.delete_one({"_id": object_id})
    return result.deleted_count > 0
