"""
Configuración centralizada de la aplicación
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "DSW Integral API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "API de pedidos, productos y clientes"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    # Internal error responses only carry diagnostic detail in debug mode
    API_DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./dsw_integral.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_ISOLATION_LEVEL: str = "SERIALIZABLE"
    DB_TRANSACTION_RETRIES: int = 3
    DB_RETRY_DELAY: float = 0.1

    # Auth (tokens are issued elsewhere, we only validate them)
    AUTH_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:3001"

    LOG_LEVEL: str = "INFO"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
