import asyncio
from contextlib import asynccontextmanager

import sentry_sdk
from alembic import command
from alembic.config import Config
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from eventinvites import __version__
from eventinvites.config.logging import setup_logging
from eventinvites.config.settings import settings
from eventinvites.events.routers import public_router as public_events_router
from eventinvites.events.routers import router as events_router
from eventinvites.routers.healthz.router import router as healthz_router

setup_logging()


async def run_migrations():
    alembic_cfg = Config("alembic.ini")
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        await run_migrations()
    yield


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        # guest names, emails and phone numbers stay out of Sentry
        send_default_pii=False,
    )

app = FastAPI(
    title="Event Invites API",
    description="API for event invitations, guest lists and RSVPs",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(events_router, tags=["Events"])
app.include_router(public_events_router, tags=["Invitations"])


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the Event Invites API"}
