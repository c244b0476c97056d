from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .core.config import settings
from .core.database import close_db_connections
from .core.error_handlers import register_exception_handlers
from .core.logging import setup_logging
from .routers import health, auth, admin, professor, student, notifications

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting Campus API ({settings.environment})")

    yield

    logger.info("Shutting down Campus API")
    await close_db_connections()
    logger.info("Shutdown complete")

app = FastAPI(
    title="Campus API - Academic Management",
    description="Students, professors and admins: modules, grades and notifications",
    version=settings.app_version,
    lifespan=lifespan
)

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(professor.router)
app.include_router(student.router)
for notifications_router in notifications.routers:
    app.include_router(notifications_router)

@app.get("/")
async def root():
    return {
        "success": True,
        "message": "Campus API",
        "version": settings.app_version,
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("campus.main:app", host="0.0.0.0", port=8000, reload=True)
