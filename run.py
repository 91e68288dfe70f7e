"""Entry point for running the Pet Market API.

Starts the FastAPI application under uvicorn.  Host and port are read
from ``API_HOST`` and ``API_PORT`` (defaults ``0.0.0.0`` and ``8000``);
other configuration such as ``SECRET_KEY`` and ``DATABASE_URL`` is
read from the environment by ``pet_market_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from pet_market_api.app.core.config import settings
from pet_market_api.app.main import app


async def main() -> None:
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
