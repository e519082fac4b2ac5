"""Script to provision an API key for a project."""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.services.auth import AuthService
from app.services.database import DatabaseService


async def create_api_key(project_id: str, user_id: str) -> str:
    """Create the schema if needed and issue a new key."""
    database = DatabaseService()
    await database.connect()
    try:
        await database.init_schema()
        return await AuthService(database).issue_key(project_id, user_id)
    finally:
        await database.disconnect()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("project_id")
    parser.add_argument("user_id")
    args = parser.parse_args()

    api_key = asyncio.run(create_api_key(args.project_id, args.user_id))
    print(f"API key for project {args.project_id}: {api_key}")
    print("Store it now, it cannot be shown again.")
