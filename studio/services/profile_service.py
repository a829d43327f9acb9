from typing import Dict, Any
from studio.db.mongodb import db
from studio.core.config import settings
from studio.schemas.profile import StudioProfileUpdate
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

def _default_profile() -> Dict[str, Any]:
    return {
        "name": settings.STUDIO_NAME,
        "ownerName": None,
        "whatsapp": "+55",
        "address": "",
        "email": "",
        "history": None,
        "mission": None,
        "image": None,
        "createdAt": datetime.utcnow()
    }

async def ensure_profile() -> Dict[str, Any]:
    """
    Return the studio profile, creating the default one on first run
    """
    profile = await db.db.profiles.find_one({})
    if not profile:
        result = await db.db.profiles.insert_one(_default_profile())
        profile = await db.db.profiles.find_one({"_id": result.inserted_id})
        logger.info("Created default studio profile")

    profile["id"] = str(profile["_id"])
    return profile

async def get_profile() -> Dict[str, Any]:
    """
    Get the studio profile (single tenant, one document)
    """
    return await ensure_profile()

async def update_profile(profile_update: StudioProfileUpdate) -> Dict[str, Any]:
    """
    Update the studio profile
    """
    profile = await ensure_profile()

    # Update only provided fields
    update_data = profile_update.dict(exclude_unset=True)

    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.profiles.update_one(
            {"_id": profile["_id"]},
            {"$set": update_data}
        )

    return await get_profile()
