from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gymcore.core.config import settings
from gymcore.core.database import init_db
from gymcore.routers import invoices, members, plans, reports


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # No migrations; tables are created from the models on startup
    init_db()
    yield


OPENAPI_TAGS = [
    {"name": "Plans", "description": "Create and read membership plans."},
    {"name": "Members", "description": "Enroll, renew, freeze, change and cancel memberships."},
    {"name": "Invoices", "description": "Freeze billed services on invoices."},
    {"name": "Reports", "description": "Month-by-month revenue realization."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Gym membership lifecycle and revenue realization API. "
        "Manage plans and memberships and recognize billed revenue over service periods."
    ),
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plans.router, prefix="/v1/plans", tags=["Plans"])
app.include_router(members.router, prefix="/v1/members", tags=["Members"])
app.include_router(invoices.router, prefix="/v1/invoices", tags=["Invoices"])
app.include_router(reports.router, prefix="/v1/reports", tags=["Reports"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
