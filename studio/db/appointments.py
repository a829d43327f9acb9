from typing import Any, Dict, List, Optional
import logging

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from studio.core.availability import holds_slot
from studio.db.mongodb import db
from studio.schemas.appointment import Appointment, AppointmentStatus
from studio.utils.dates import normalize_date, normalize_time

logger = logging.getLogger(__name__)

CANONICAL_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
CANONICAL_TIME_PATTERN = r"^\d{2}:\d{2}$"

def appointment_from_doc(doc: Dict[str, Any]) -> Optional[Appointment]:
    """
    Turn a stored appointment into a typed record with a canonical date.

    Older rows may carry a bare day number instead of "YYYY-MM-DD"; those are
    resolved against the month they were created in. Rows that still cannot
    be read are logged and skipped.
    """
    created_at = doc.get("createdAt")
    try:
        date_str = normalize_date(
            doc.get("date"),
            year=created_at.year if created_at else None,
            month_index=created_at.month - 1 if created_at else None
        )
        return Appointment(
            id=str(doc["_id"]),
            serviceId=str(doc.get("serviceId") or ""),
            serviceName=doc.get("serviceName") or "Serviço",
            clientName=doc.get("clientName") or "Cliente",
            clientWhatsapp=doc.get("clientWhatsapp") or "",
            price=float(doc.get("price") or 0),
            date=date_str,
            time=doc.get("time") or "",
            status=doc.get("status") or AppointmentStatus.SCHEDULED,
            createdAt=created_at,
            updatedAt=doc.get("updatedAt")
        )
    except ValueError as e:
        # pydantic's ValidationError is a ValueError too
        logger.warning(f"Skipping unreadable appointment {doc.get('_id')}: {e}")
        return None

async def find_appointments(
    query: Dict[str, Any],
    skip: int = 0,
    limit: Optional[int] = None
) -> List[Appointment]:
    """
    Run a query against the appointments collection, ordered by date and time
    """
    cursor = db.db.appointments.find(query).sort([("date", ASCENDING), ("time", ASCENDING)]).skip(skip)
    if limit:
        cursor = cursor.limit(limit)
    docs = await cursor.to_list(length=limit)
    return [appointment for appointment in (appointment_from_doc(doc) for doc in docs) if appointment]

async def find_appointment(appointment_id: str) -> Optional[Appointment]:
    """
    Get a single appointment by ID
    """
    try:
        object_id = ObjectId(appointment_id)
    except (InvalidId, TypeError):
        return None

    doc = await db.db.appointments.find_one({"_id": object_id})
    if not doc:
        return None
    return appointment_from_doc(doc)

async def migrate_legacy_appointments() -> int:
    """
    Rewrite appointments stored before dates were canonical.

    Queries and the unique slot index only see "YYYY-MM-DD" dates and rows
    carrying holdsSlot, so older rows are brought to that shape once at
    startup. Rows whose date cannot be recovered are left alone and logged.

    Returns:
        Number of rows rewritten
    """
    query = {"$or": [
        {"holdsSlot": {"$exists": False}},
        {"date": {"$not": {"$regex": CANONICAL_DATE_PATTERN}}},
        {"time": {"$not": {"$regex": CANONICAL_TIME_PATTERN}}}
    ]}
    docs = await db.db.appointments.find(query).to_list(length=None)

    migrated = 0
    for doc in docs:
        created_at = doc.get("createdAt")
        try:
            date_str = normalize_date(
                doc.get("date"),
                year=created_at.year if created_at else None,
                month_index=created_at.month - 1 if created_at else None
            )
            time_str = normalize_time(doc.get("time") or "")
            status = AppointmentStatus(doc.get("status") or AppointmentStatus.SCHEDULED)
        except ValueError as e:
            logger.warning(f"Cannot migrate appointment {doc.get('_id')}: {e}")
            continue

        try:
            await db.db.appointments.update_one(
                {"_id": doc["_id"]},
                {"$set": {
                    "date": date_str,
                    "time": time_str,
                    "status": status.value,
                    "holdsSlot": holds_slot(status)
                }}
            )
        except DuplicateKeyError:
            logger.warning(
                f"Appointment {doc['_id']} collides with another booking on "
                f"{date_str} {time_str}; left for manual review"
            )
            continue
        migrated += 1

    if migrated:
        logger.info(f"Migrated {migrated} legacy appointments")
    return migrated
