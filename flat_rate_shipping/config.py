from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./shipping.db"
    DEFAULT_SHOP_ID: str = "primary-shop"
    LOG_LEVEL: str = "INFO"

    # Package documents the flat-rate stage reads its switches from
    MARKETPLACE_PACKAGE_NAME: str = "reaction-marketplace"
    SHIPPING_RATES_PACKAGE_NAME: str = "reaction-shipping-rates"

    # Extra passes the rate pipeline runs for stages that asked to be retried
    RATE_RETRY_PASSES: int = 1

    class Config:
        env_file = ".env"


settings = Settings()
