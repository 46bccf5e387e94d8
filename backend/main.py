import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import admin, auth, candidate, employer, jobs, notification
from utils_others.error_handler import register_exception_handlers
from utils_others.logging_config import configure_logging

load_dotenv()
configure_logging()
log = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8080",
]

# Validate origins to prevent security issues
def validate_origins(origins_list):
    """Validate and filter origins for security"""
    validated_origins = []
    for origin in origins_list:
        origin = origin.strip()
        if not origin:
            continue

        # Basic validation - only allow http/https protocols
        if not origin.startswith(('http://', 'https://')):
            log.warning("Invalid origin format: %s", origin)
            continue

        # Production must not fall back to plain-http origins
        if os.getenv("ENVIRONMENT") == "production" and not origin.startswith("https://"):
            log.warning("Production origin must use https: %s", origin)
            continue

        validated_origins.append(origin)

    return validated_origins

def get_allowed_origins():
    allowed = os.getenv("ALLOWED_ORIGINS")
    origins = [x.strip() for x in allowed.split(",")] if allowed else DEV_ORIGINS
    origins = validate_origins(origins)
    if not origins:
        if os.getenv("ENVIRONMENT") == "production":
            raise RuntimeError("ALLOWED_ORIGINS must list at least one https origin in production")
        origins = ["http://localhost:3000"]
        log.warning("No valid origins configured, using localhost fallback")
    return origins

def create_app() -> FastAPI:
    app = FastAPI(
        title="Job Portal API",
        description="Backend API for the job portal: jobs, applications and candidate notifications",
        version="1.0.0"
    )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "message": "Job Portal API is running"}

    app.include_router(auth.router, prefix="/auth")
    app.include_router(jobs.router, prefix="/jobs")
    app.include_router(candidate.router, prefix="/candidate")
    app.include_router(employer.router, prefix="/employer")
    app.include_router(admin.router, prefix="/admin")
    app.include_router(notification.router, prefix="/notification")
    register_exception_handlers(app)

    origins = get_allowed_origins()
    log.info("CORS enabled for origins: %s", origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
    )
    return app

app = create_app()
