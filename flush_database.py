import asyncio
from app.database import engine, Base

# Import all models so SQLAlchemy knows them
from app.models import Assignment, AssignmentSubmission  # noqa: F401

async def flush_database():
    async with engine.begin() as conn:
        print("⚠️ Dropping assignment and submission tables...")
        await conn.run_sync(Base.metadata.drop_all)
        print("✅ Tables dropped successfully!")

        print("🚀 Recreating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ Tables recreated successfully!")

if __name__ == "__main__":
    asyncio.run(flush_database())
