import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from circles.config import get_settings
from circles.database import engine, Base
from circles.routers import contacts, conversations, opportunities, network, actions, ai, auth
from circles import models  # noqa: F401  Import to ensure tables are registered
from circles.services.view_state import ViewStateRegistry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Relationship Circles API...")

    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    if not settings.ai_configured:
        logger.warning("AI_API_KEY not set - AI endpoints will return errors")

    yield

    # Shutdown
    logger.info("Shutting down Relationship Circles API...")
    app.state.view_states.reset()


app = FastAPI(
    title="Relationship Circles",
    description="Personal relationship manager with attention tracking and AI suggestions",
    version="1.0.0",
    lifespan=lifespan,
)

# Drag overrides and dismissed reminders, per user, in memory only
app.state.view_states = ViewStateRegistry()

# CORS middleware for the web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(contacts.router, prefix="/api")
app.include_router(conversations.router, prefix="/api")
app.include_router(opportunities.router, prefix="/api")
app.include_router(network.router, prefix="/api")
app.include_router(actions.router, prefix="/api")
app.include_router(ai.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Relationship Circles API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "ai_configured": settings.ai_configured,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "circles.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=True,
    )
