"""
FastAPI application entry point.

This is the main application that ties together all components:
- API routes for the invoice form actions and sign-in
- Database lifecycle management
- Error handling and logging
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from invoicedesk import __version__
from invoicedesk.api.routes import auth, health, invoices
from invoicedesk.api.schemas import ErrorResponse
from invoicedesk.config import get_settings
from invoicedesk.infrastructure.database import close_db, get_session_factory, init_db
from invoicedesk.infrastructure.gateway import InvoiceGateway, UserGateway
from invoicedesk.services.actions import InvoiceActions
from invoicedesk.services.auth import UserCredentialVerifier
from invoicedesk.services.cache import PathCache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    
    Handles startup and shutdown tasks:
    - Initialize database tables
    - Build the gateway, view cache and credential verifier
    - Clean up on shutdown
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    
    logger.info(f"Starting invoicedesk v{__version__}")
    logger.info(f"Debug mode: {settings.debug}")
    
    await init_db()
    logger.info("Database initialized")
    
    session_factory = get_session_factory()
    app.state.invoice_actions = InvoiceActions(
        gateway=InvoiceGateway(session_factory),
        cache=PathCache(ttl_seconds=settings.listing_cache_ttl_seconds),
    )
    app.state.credential_verifier = UserCredentialVerifier(
        users=UserGateway(session_factory),
        default_redirect=settings.login_redirect_path,
    )
    
    yield  # Application runs here
    
    # Shutdown
    logger.info("Shutting down invoicedesk")
    await close_db()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    
    Returns:
        Configured FastAPI instance ready to serve requests.
    """
    settings = get_settings()
    
    app = FastAPI(
        title="invoicedesk API",
        description="Form actions for the invoice dashboard: create, edit and delete invoices, and sign in.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    
    # Register routers
    app.include_router(health.router)
    app.include_router(invoices.router)
    app.include_router(auth.router)
    
    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler for unhandled errors."""
        logger.exception(f"Unhandled error: {exc}")
        
        # Don't expose internal errors in production
        if settings.debug:
            detail = str(exc)
        else:
            detail = "An internal error occurred"
        
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal Server Error", detail=detail).model_dump(),
        )
    
    return app


# Development server entry point
if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "invoicedesk.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
