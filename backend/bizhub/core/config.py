from decimal import Decimal
from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    PROJECT_NAME: str = "BizHub Orders"
    API_PREFIX: str = "/api"
    # development: error responses include exception detail
    ENVIRONMENT: str = Field(default="production", description="development/production")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Database
    SQLITE_DATABASE_URI: str = "sqlite:///./bizhub.db"

    # Pricing
    DELIVERY_FREE_THRESHOLD: Decimal = Decimal("50")
    DELIVERY_FLAT_COST: Decimal = Decimal("2")
    DEFAULT_CURRENCY: str = "BD"

    # Ledger policies
    # reject: over-ordering fails with InsufficientStock
    # clamp: stock is clamped at zero and the order proceeds
    STOCK_SHORTFALL_POLICY: str = Field(default="reject", pattern="^(reject|clamp)$")
    # true: a failed credit/journal side effect aborts the whole order write
    STRICT_LEDGER_SIDE_EFFECTS: bool = False
    COMPANY_WARNING_RATIO: Decimal = Decimal("0.8")

    # Roles
    REVIEWER_ROLES: List[str] = ["accountant"]
    RESTRICTED_ROLES: List[str] = ["salesman"]
    ELEVATED_ROLES: List[str] = ["owner", "admin"]
    STATISTICS_ROLES: List[str] = ["owner", "admin", "accountant"]

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
logger.info(f"Settings loaded: API_PREFIX={settings.API_PREFIX}, STOCK_SHORTFALL_POLICY={settings.STOCK_SHORTFALL_POLICY}")
