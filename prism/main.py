import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import alembic.config
import alembic.command
from prism.core.config import settings
from prism.core.database import engine
from prism.core.exceptions import PersistenceError
from prism.api.router import api_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def run_migrations():
    """Sync function to run migrations"""
    alembic_cfg = alembic.config.Config("alembic.ini")
    alembic.command.upgrade(alembic_cfg, "head")


# Close the engine once everything is done and close all the sessions
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Apply any pending migrations automatically when the app starts
    if settings.RUN_MIGRATIONS:
        try:
            await asyncio.to_thread(run_migrations)
            logging.info("Migrations applied successfully (or already up-to-date)")
        except Exception as e:
            logging.error(f"Migration error during startup: {e}")

    yield
    await engine.dispose()


app = FastAPI(title="PRISM Clean Room API", lifespan=lifespan)

# Include the master router containing all our endpoints
app.include_router(api_router)


# An approved result that could not be recorded is not released
@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logging.error(f"Persistence failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Failed to record query result"},
    )


@app.get("/")
async def root():
    return {"message": "Welcome to the PRISM clean room API"}


@app.get("/health")
async def health():
    return {"status": "ok"}
