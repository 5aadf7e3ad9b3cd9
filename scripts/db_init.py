#!/usr/bin/env python3
"""
Database initialization script
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add the project root to the Python path
current_dir = Path(__file__).parent
root_dir = current_dir.parent
sys.path.insert(0, str(root_dir))

async def init_database() -> None:
    """Create tables and seed the default categories"""
    from blog_api.config import settings
    from blog_api.db.session import init_db

    print(f"Initializing database: {settings.database_url}")
    await init_db()
    await seed_database()
    print("Database initialized successfully")

async def seed_database() -> None:
    """Insert default categories that are missing"""
    from blog_api.db.session import AsyncSessionLocal
    from blog_api.db.seed import seed_categories

    async with AsyncSessionLocal() as db:
        created = await seed_categories(db)
    print(f"Seeded {created} categories")

async def check_database_connection() -> bool:
    """Check if database is accessible"""
    from blog_api.db.session import engine
    from sqlalchemy import text

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        print("Database connection successful")
        return True
    except Exception as e:
        print(f"Database connection failed: {e}")
        return False

async def drop_database() -> None:
    """Drop all database tables"""
    from blog_api.db.session import drop_db

    await drop_db()
    print("Database dropped successfully")

async def reset_database() -> None:
    """Drop everything, then recreate and seed"""
    await drop_database()
    await init_database()

def main() -> None:
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Database Initialization")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Create tables and seed categories")
    subparsers.add_parser("check", help="Check database connection")
    subparsers.add_parser("seed", help="Seed default categories")

    drop_parser = subparsers.add_parser("drop", help="Drop database (DANGEROUS!)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm drop")

    reset_parser = subparsers.add_parser("reset", help="Drop and reinitialize")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command in ("drop", "reset") and not args.confirm:
        print("WARNING: This will drop ALL tables and data!")
        print("   Use --confirm flag to proceed")
        sys.exit(1)

    try:
        if args.command == "init":
            asyncio.run(init_database())
        elif args.command == "check":
            success = asyncio.run(check_database_connection())
            sys.exit(0 if success else 1)
        elif args.command == "seed":
            asyncio.run(seed_database())
        elif args.command == "drop":
            asyncio.run(drop_database())
        elif args.command == "reset":
            asyncio.run(reset_database())
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
