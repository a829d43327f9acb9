from typing import Dict, Any, List, Optional
from studio.db.mongodb import db
from studio.schemas.appointment import AppointmentStatus
from studio.schemas.client import ClientCreate, ClientUpdate
from studio.utils.formatting import clean_phone
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError
import logging

logger = logging.getLogger(__name__)

class WhatsappTakenError(Exception):
    """Another client is already registered with this WhatsApp number."""

    def __init__(self, whatsapp: str):
        self.whatsapp = whatsapp
        super().__init__(f"WhatsApp number {whatsapp} belongs to another client")

async def _spent_by_whatsapp() -> Dict[str, float]:
    """
    Sum the price of completed appointments per client WhatsApp number
    """
    pipeline = [
        {"$match": {"status": AppointmentStatus.COMPLETED.value}},
        {"$group": {"_id": "$clientWhatsapp", "total": {"$sum": "$price"}}}
    ]
    rows = await db.db.appointments.aggregate(pipeline).to_list(length=None)
    return {row["_id"]: float(row["total"] or 0) for row in rows if row["_id"]}

def _client_from_doc(doc: Dict[str, Any], spent: Dict[str, float]) -> Dict[str, Any]:
    doc["id"] = str(doc["_id"])
    doc.setdefault("email", "")
    doc["totalSpent"] = spent.get(doc.get("whatsapp"), 0.0)
    return doc

async def get_clients() -> List[Dict[str, Any]]:
    """
    Get all clients with their completed spend
    """
    cursor = db.db.clients.find({}).sort("name", 1)
    clients = await cursor.to_list(length=None)
    spent = await _spent_by_whatsapp()
    return [_client_from_doc(client, spent) for client in clients]

async def get_client_by_id(client_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a client by ID
    """
    try:
        client = await db.db.clients.find_one({"_id": ObjectId(client_id)})
    except (InvalidId, TypeError):
        return None
    if not client:
        return None
    spent = await _spent_by_whatsapp()
    return _client_from_doc(client, spent)

async def get_client_by_whatsapp(whatsapp: str) -> Optional[Dict[str, Any]]:
    """
    Get a client by WhatsApp number (any formatting)
    """
    client = await db.db.clients.find_one({"whatsapp": clean_phone(whatsapp)})
    if client:
        client["id"] = str(client["_id"])
    return client

async def create_client(client_in: ClientCreate) -> Optional[Dict[str, Any]]:
    """
    Create a client; returns None if the WhatsApp number is already registered
    """
    if await get_client_by_whatsapp(client_in.whatsapp):
        return None

    client_data = client_in.dict()
    client_data["createdAt"] = datetime.utcnow()

    try:
        result = await db.db.clients.insert_one(client_data)
    except DuplicateKeyError:
        return None
    created_client = await db.db.clients.find_one({"_id": result.inserted_id})
    return _client_from_doc(created_client, {})

async def ensure_client(name: str, whatsapp: str) -> Dict[str, Any]:
    """
    Register a booking client the first time their number is seen
    """
    digits = clean_phone(whatsapp)
    await db.db.clients.update_one(
        {"whatsapp": digits},
        {"$setOnInsert": {
            "name": name,
            "whatsapp": digits,
            "email": "",
            "notes": None,
            "createdAt": datetime.utcnow()
        }},
        upsert=True
    )
    return await get_client_by_whatsapp(digits)

async def update_client(client_id: str, client_update: ClientUpdate) -> Optional[Dict[str, Any]]:
    """
    Update a client

    Raises:
        WhatsappTakenError: the new number is registered to another client
    """
    client = await get_client_by_id(client_id)
    if not client:
        return None

    # Update only provided fields
    update_data = client_update.dict(exclude_unset=True)

    whatsapp = update_data.get("whatsapp")
    if whatsapp and whatsapp != client.get("whatsapp"):
        owner = await get_client_by_whatsapp(whatsapp)
        if owner and owner["id"] != client_id:
            raise WhatsappTakenError(whatsapp)

    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        try:
            await db.db.clients.update_one(
                {"_id": ObjectId(client_id)},
                {"$set": update_data}
            )
        except DuplicateKeyError as e:
            raise WhatsappTakenError(whatsapp or "") from e

    return await get_client_by_id(client_id)

async def delete_client(client_id: str) -> bool:
    """
    Delete a client (their appointments are kept)
    """
    try:
        object_id = ObjectId(client_id)
    except (InvalidId, TypeError):
        return False

    result = await db.db.clients.delete_one({"_id": object_id})
    return result.deleted_count > 0
