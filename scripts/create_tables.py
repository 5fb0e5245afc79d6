"""
Script to create database tables using SQLAlchemy
Run this once to initialize the database schema
"""
import asyncio
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from erp_backend.db import init_db, engine, Base


async def create_tables():
    """Create all database tables"""
    print("Creating database tables...")
    try:
        await init_db()
        print("Database tables created successfully!")
        print("\nTables:")
        for table_name in Base.metadata.tables:
            print(f"  - {table_name}")
    except Exception as e:
        print(f"Error creating tables: {e}")
        raise
    finally:
        await engine.dispose()

if __name__ == "__main__":
    asyncio.run(create_tables())
