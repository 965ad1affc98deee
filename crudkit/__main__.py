"""
Run the API server:

  python -m crudkit

Binds to SERVER_HOST:SERVER_PORT from the environment or .env.
"""

import sys

import uvicorn
from dotenv import load_dotenv

from crudkit.core.config import get_settings


def main() -> int:
    load_dotenv()
    settings = get_settings()
    uvicorn.run(
        "crudkit.main:create_app",
        factory=True,
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
