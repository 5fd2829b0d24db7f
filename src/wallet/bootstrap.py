import logging
import os
from typing import Optional

from sqlalchemy.engine import make_url

from src.config.settings import Settings
from src.wallet.services.wallet_service import WalletService
from src.wallet.store.wallet_database import WalletDatabase
from src.wallet.time.time_source import TimeSource

logger = logging.getLogger(__name__)


def ensure_data_dir(dsn: str) -> None:
    url = make_url(dsn)
    if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
        return
    directory = os.path.dirname(os.path.abspath(url.database))
    os.makedirs(directory, exist_ok=True)


def build_wallet_service(
        settings: Optional[Settings] = None,
        time_source: Optional[TimeSource] = None,
) -> WalletService:
    """
    Start-up routine: opens the wallet database, creates its tables and
    returns the single WalletService the host application should share.
    """
    settings = settings or Settings()
    ensure_data_dir(settings.DATABASE_URL)
    database = WalletDatabase.from_dsn(
        settings.DATABASE_URL,
        busy_timeout_ms=settings.SQLITE_BUSY_TIMEOUT_MS,
    )
    service = WalletService.from_database(
        database,
        time_source=time_source,
        wallet_name=settings.WALLET_NAME,
        public_funds_account=settings.PUBLIC_FUNDS_ACCOUNT,
    )
    logger.info(f"Wallet service ready on {database.engine.url!r}")
    return service
