"""
Run the CareAI API server.

    python -m careai

Settings are read from the environment, see 'careai.config'.
"""

import uvicorn
from loguru import logger

from careai.api.auth.api_key import ApiKeyAuthProvider
from careai.api.server import create_app
from careai.config import Settings
from careai.conversation_database.controller import build_controller


def main() -> None:
    settings = Settings.from_env()
    app = create_app(build_controller(settings), ApiKeyAuthProvider(settings.api_key), settings)
    logger.info(f"Starting CareAI API on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
