from typing import Dict, Any, List, Optional
from studio.db.mongodb import db
from studio.schemas.service import ServiceCreate, ServiceUpdate
from studio.utils.formatting import format_price, parse_duration_minutes
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId

def _service_from_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    doc["id"] = str(doc["_id"])
    doc["price"] = float(doc.get("price") or 0)
    doc["priceLabel"] = format_price(doc["price"])
    doc.setdefault("duration", "")
    doc["durationMinutes"] = doc.get("durationMinutes") or parse_duration_minutes(doc["duration"])
    return doc

async def get_services() -> List[Dict[str, Any]]:
    """
    Get the whole service catalog
    """
    cursor = db.db.services.find({}).sort("name", 1)
    services = await cursor.to_list(length=None)
    return [_service_from_doc(service) for service in services]

async def get_service_by_id(service_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a service by ID
    """
    try:
        service = await db.db.services.find_one({"_id": ObjectId(service_id)})
    except (InvalidId, TypeError):
        return None
    if service:
        service = _service_from_doc(service)
    return service

async def create_service(service_in: ServiceCreate) -> Dict[str, Any]:
    """
    Add a service to the catalog
    """
    service_data = service_in.dict()
    service_data["durationMinutes"] = parse_duration_minutes(service_data["duration"])
    service_data["createdAt"] = datetime.utcnow()

    result = await db.db.services.insert_one(service_data)
    created_service = await db.db.services.find_one({"_id": result.inserted_id})
    return _service_from_doc(created_service)

async def update_service(service_id: str, service_update: ServiceUpdate) -> Optional[Dict[str, Any]]:
    """
    Update a service
    """
    service = await get_service_by_id(service_id)
    if not service:
        return None

    # Update only provided fields
    update_data = service_update.dict(exclude_unset=True)

    if update_data:
        if "duration" in update_data:
            update_data["durationMinutes"] = parse_duration_minutes(update_data["duration"])
        update_data["updatedAt"] = datetime.utcnow()

        await db.db.services.update_one(
            {"_id": ObjectId(service_id)},
            {"$set": update_data}
        )

    return await get_service_by_id(service_id)

async def delete_service(service_id: str) -> bool:
    """
    Remove a service from the catalog
    """
    try:
        object_id = ObjectId(service_id)
    except (InvalidId, TypeError):
        return False

    result = await db.db.services.delete_one({"_id": object_id})
    return result.deleted_count > 0
