from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from studio.core.config import settings
import logging

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None
    db = None

db = Database()

async def connect_to_mongo():
    """Connect to MongoDB."""
    try:
        logger.info("Connecting to MongoDB...")
        db.client = AsyncIOMotorClient(
            settings.MONGO_URI,
            serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS
        )
        db.db = db.client[settings.DB_NAME]
        logger.info("Connected to MongoDB.")

        # Create indexes for collections
        await create_indexes()

    except Exception as e:
        logger.error(f"Could not connect to MongoDB: {e}")
        raise e

async def close_mongo_connection():
    """Close MongoDB connection."""
    if db.client:
        logger.info("Closing MongoDB connection...")
        db.client.close()
        logger.info("MongoDB connection closed.")

async def create_indexes():
    """Create indexes for collections."""
    try:
        # Admins collection indexes
        await db.db.admins.create_index("email", unique=True)

        # Operating hours: one document per weekday
        await db.db.operating_hours.create_index("dayOfWeek", unique=True)

        # Agenda blocks collection indexes
        await db.db.agenda_blocks.create_index([("startDate", ASCENDING), ("endDate", ASCENDING)])

        # Clients collection indexes
        await db.db.clients.create_index("whatsapp", unique=True)

        # Appointments collection indexes
        await db.db.appointments.create_index("date")
        await db.db.appointments.create_index("clientWhatsapp")
        await db.db.appointments.create_index([("status", ASCENDING), ("date", ASCENDING)])

        # No double-booking: only rows that hold their slot take part
        await db.db.appointments.create_index(
            [("date", ASCENDING), ("time", ASCENDING), ("serviceId", ASCENDING)],
            unique=True,
            partialFilterExpression={"holdsSlot": True},
            name="unique_active_slot"
        )

        logger.info("MongoDB indexes created successfully.")
    except Exception as e:
        logger.error(f"Failed to create MongoDB indexes: {e}")
        raise
