import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from padpool.clock import utc_today
from padpool.config import ServerConfig, load_config
from padpool.load_env import config_path, data_dir, host, log_level, port
from padpool.pool_store import PoolStore
from padpool.routers import pool
from padpool.scheduler import PoolScheduler
from padpool.services.pool_service import PoolService

logging.basicConfig(level=log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the current pool, trim stale pools and start the daily rotation.
    This function is called to start the server.
    """
    pool_scheduler: PoolScheduler = app.state.pool_scheduler
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, pool_scheduler.run_startup)

    scheduler = AsyncIOScheduler(timezone="UTC")
    pool_scheduler.start(scheduler)
    scheduler.start()
    logging.info(f"Serving pool files from: {pool_scheduler.store.data_dir}")
    try:
        yield
    finally:
        scheduler.shutdown()
        logging.info("Stop Server")


def create_app(
    config: ServerConfig | None = None,
    store: PoolStore | None = None,
    today: Callable[[], date] = utc_today,
) -> FastAPI:
    """Build the FastAPI application

    Args:
        config (ServerConfig | None, optional): Loaded from config.json and the environment when omitted.
        store (PoolStore | None, optional): Built from config when omitted.
        today (Callable[[], date], optional): Source of the current UTC date. Defaults to utc_today.

    Returns:
        FastAPI: Application with its pool scheduler and service attached to app.state
    """
    if config is None:
        config = load_config(config_path, data_dir, host=host, port=port)
    if store is None:
        store = PoolStore(config.data_dir, pool_size=config.pool_size)

    app = FastAPI(lifespan=lifespan)
    app.state.config = config
    app.state.pool_scheduler = PoolScheduler(config, store, today=today)
    app.state.pool_service = PoolService(config, store, today=today)
    app.include_router(pool.pool_router)
    return app
