from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from bookstore.core.config import settings
from bookstore.core.middleware import RequestContextMiddleware
from bookstore.core.logging import setup_logging
from bookstore.core.errors import register_exception_handlers


# Routers
from bookstore.api.routes.auth import router as auth_router
from bookstore.api.routes.books import router as books_router
from bookstore.api.routes.genres import router as genres_router
from bookstore.api.routes.transactions import router as transactions_router
from bookstore.api.routes.health import router as health_router


setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Bookstore API - books, genres, users and transactions for a bookstore back office.",
    version=settings.VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middlewares
app.add_middleware(RequestContextMiddleware)

# Root endpoint
@app.get("/")
async def root():
    """API root endpoint with basic information."""
    return {
        "success": True,
        "message": "Welcome to Bookstore API",
        "data": {
            "version": settings.VERSION,
            "docs_url": "/docs",
            "endpoints": {
                "auth": "/auth",
                "books": "/books",
                "genre": "/genre",
                "transactions": "/transactions",
                "health": "/health-check",
            },
            "authentication": "Bearer token from /auth/login, required for /auth/me and /transactions",
        },
    }

register_exception_handlers(app)

# Mount routers
api = APIRouter()
api.include_router(health_router)
api.include_router(auth_router)
api.include_router(books_router)
api.include_router(genres_router)
api.include_router(transactions_router)
app.include_router(api)
