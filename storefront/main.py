"""
Storefront Application

Cart reconciliation, checkout and a tool-calling shopping assistant
over an in-memory product catalog.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .routes import products_router, cart_router, checkout_router, chat_router
from .core.config import settings
from .core.errors import AssistantUnavailable
from .core.identity import IdentityMiddleware
from .routes.chat import assistant_unavailable_handler, chat_validation_handler

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"LLM configured: {settings.llm_configured} (model={settings.llm_model})")

    yield

    logger.info(f"{settings.app_name} shutting down...")
    # Cleanup language model client
    from .routes.chat import chat_model
    if chat_model:
        await chat_model.close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Cart, checkout and shopping assistant API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Identity headers -> request.state
app.add_middleware(IdentityMiddleware)

# Chat errors answer {"error": ...}
app.add_exception_handler(AssistantUnavailable, assistant_unavailable_handler)
app.add_exception_handler(RequestValidationError, chat_validation_handler)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(chat_router)


@app.get("/")
async def home():
    """API index"""
    return {
        "message": f"{settings.app_name} API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
            "checkout": "/api/checkout",
            "chat": "/api/chat",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "storefront",
        "llm_configured": settings.llm_configured,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
