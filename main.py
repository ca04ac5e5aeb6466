from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from stitchhub.core.config import settings
from stitchhub.core.database import engine, Base
from stitchhub.core.errors import register_exception_handlers
from stitchhub.api.routes import auth, users, work, attendance, materials, products, finance, exports
import stitchhub.models  # noqa: F401  (registers every table on Base.metadata)
import logging

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Back-office API for a stitching workshop: work, attendance, salaries, materials, orders, expenses and exports"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(work.router, prefix="/api")
app.include_router(attendance.router, prefix="/api")
app.include_router(materials.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(finance.router, prefix="/api")
app.include_router(exports.router, prefix="/api")


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down...")
    engine.dispose()


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.APP_VERSION
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
