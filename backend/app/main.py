"""
DSW Integral - Backend API
Pedidos, productos y clientes para la tienda
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from app.api import customers, orders, products
from app.core.config import settings
from app.core.database import engine, init_db
from app.core.errors import register_error_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(init_database: bool = True, debug: bool = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        init_database: Create missing tables on startup
        debug: Override settings.API_DEBUG for error details
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_database:
            init_db()
            logger.info("Database tables ready")
        yield

    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        lifespan=lifespan,
    )

    # Error handling first so CORS headers are added to error responses too
    register_error_handlers(app, debug=debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
    app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
    app.include_router(customers.router, prefix="/api/v1/customers", tags=["Customers"])

    @app.get("/")
    async def root():
        """Endpoint raíz - Verificación de estado de la API"""
        return {
            "message": "DSW Integral API",
            "status": "online",
            "version": settings.API_VERSION,
        }

    @app.get("/health")
    def health():
        """Health check endpoint para monitoreo - tests database connectivity"""
        start_time = time.time()

        db_status = "unknown"
        db_latency_ms = None

        try:
            db_start = time.time()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            db_latency_ms = round((time.time() - db_start) * 1000, 2)
            db_status = "connected"
        except Exception as e:
            logger.warning(f"Health check database error: {e}")
            db_status = "disconnected"

        total_latency_ms = round((time.time() - start_time) * 1000, 2)

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "service": "dsw-integral-api",
            "version": settings.API_VERSION,
            "database": {
                "status": db_status,
                "latency_ms": db_latency_ms,
            },
            "total_latency_ms": total_latency_ms
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT)
