from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from pdc_pro.core.config import settings


async def init_db(database=None):
    """
    Initialize MongoDB connection and Beanie ODM.

    Args:
        database: Optional Motor database to bind instead of DATABASE_URL
                  (tests pass an in-memory mongomock-motor database)
    """
    if database is None:
        client = AsyncIOMotorClient(settings.DATABASE_URL)

        # Selecting the database name from the URL or default
        db_name = client.get_default_database(settings.DATABASE_NAME).name
        database = client[db_name]

    # Import models
    from pdc_pro.models.user import User

    # Initialize Beanie
    await init_beanie(
        database=database,
        document_models=[
            User,
        ]
    )
