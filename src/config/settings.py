import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///data/wallet/wallet.db"
    )

    # Wallet constants
    WALLET_NAME: str = "Atri币"  # currency label, not persisted
    PUBLIC_FUNDS_ACCOUNT: int = 0

    SQLITE_BUSY_TIMEOUT_MS: int = 30000


settings = Settings()
