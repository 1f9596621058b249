import asyncio
import os
import sys

from dotenv import load_dotenv

# Ensure backend path is in sys.path
if os.path.exists("backend"):
    sys.path.append(os.path.join(os.getcwd(), "backend"))
else:
    sys.path.append(os.getcwd())

from portal.errors import InitializationError
from portal.infra.redis import close_client, create_client
from portal.settings import load_settings


async def check_store():
    load_dotenv()
    settings = load_settings()
    try:
        client = create_client(settings)
    except InitializationError as e:
        print(f"Store config unusable: {e.reason}")
        sys.exit(1)
    print(f"Connecting to {settings.store_url()}")
    try:
        await client.ping()
        print("Ping successful!")
        assignments = await client.hlen(f"col:{settings.assignments_path()}")
        schedule = await client.hlen(f"col:{settings.schedule_path()}")
        print(f"app_id={settings.app_id} assignments={assignments} schedule_entries={schedule}")
    except Exception as e:
        print(f"Failed to connect: {e}")
        sys.exit(1)
    finally:
        await close_client(client)


if __name__ == "__main__":
    asyncio.run(check_store())
