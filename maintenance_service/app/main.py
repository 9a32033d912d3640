import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, engine
from shared.helpers.exception_handler import setup_exception_handlers
from shared.models import users  # noqa: F401
from .lifecycle.errors import MaintenanceError
from .lifecycle.staff_assignment_pool import EntityLocks
from .models import (  # noqa: F401
    maintenance_request,
    maintenance_staff,
    notifications,
    request_assignment,
    request_workflow,
)
from .router import maintenance_request_router, notification_router, staff_router, user_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s]: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(title="Maintenance Request Service API", lifespan=lifespan)

# Per-request and per-staff locks, shared by all handlers in this process
app.state.entity_locks = EntityLocks()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app, MaintenanceError)

# Include routers
app.include_router(maintenance_request_router.router)
app.include_router(staff_router.router)
app.include_router(notification_router.router)
app.include_router(user_router.router)


@app.get("/health")
def health():
    return {"status": "ok", "service": settings.APP_NAME}
