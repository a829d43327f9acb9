from typing import Dict, Any, Optional
from studio.db.mongodb import db
from studio.core.auth import get_password_hash, verify_password
from studio.core.config import settings
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

async def get_admin_by_email(email: str) -> Optional[Dict[str, Any]]:
    """
    Get an admin by email
    """
    admin = await db.db.admins.find_one({"email": email.lower()})
    if admin:
        admin["id"] = str(admin["_id"])
    return admin

async def authenticate_admin(email: str, password: str) -> Optional[Dict[str, Any]]:
    """
    Return the admin if the credentials match, None otherwise
    """
    admin = await get_admin_by_email(email)
    if not admin:
        return None
    if not verify_password(password, admin["password"]):
        return None

    await db.db.admins.update_one(
        {"_id": admin["_id"]},
        {"$set": {"lastLogin": datetime.utcnow()}}
    )
    return admin

async def ensure_admin() -> None:
    """
    Create the bootstrap admin from settings when the studio has none yet
    """
    if await db.db.admins.count_documents({}) > 0:
        return

    if not settings.ADMIN_PASSWORD:
        logger.warning("No admin account exists and ADMIN_PASSWORD is not set; admin routes are unreachable")
        return

    await db.db.admins.insert_one({
        "email": settings.ADMIN_EMAIL.lower(),
        "password": get_password_hash(settings.ADMIN_PASSWORD),
        "role": "admin",
        "createdAt": datetime.utcnow()
    })
    logger.info(f"Created bootstrap admin {settings.ADMIN_EMAIL}")
