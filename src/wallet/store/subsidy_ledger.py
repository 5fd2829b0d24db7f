import logging
from typing import Optional

from sqlalchemy import text

from src.wallet.domain.exceptions import StorageError
from src.wallet.domain.wallet import SubsidyRecord
from src.wallet.store.wallet_database import WalletDatabase, WriteSession, require_write

logger = logging.getLogger(__name__)


class SubsidyLedger:
    """
    Append-only log of subsidy disbursements (`subsidy` table).
    No update or delete path; order is physical insertion order (rowid).
    """

    def __init__(self, database: WalletDatabase):
        self.database = database
        self.ensure_schema()

    def ensure_schema(self) -> None:
        with self.database.write() as session:
            conn = session.connection
            conn.execute(
                text(
                    """
                    CREATE TABLE IF NOT EXISTS subsidy (
                        time TEXT,
                        uid INTEGER,
                        money INTEGER
                    )
                    """
                )
            )
            conn.execute(
                text(
                    """
                    CREATE INDEX IF NOT EXISTS ix_subsidy_uid
                    ON subsidy (uid)
                    """
                )
            )

    def append_record(self, record: SubsidyRecord) -> None:
        with self.database.write() as session:
            self.append_in(session, record)

    def append_in(self, session: WriteSession, record: SubsidyRecord) -> None:
        require_write(session).connection.execute(
            text(
                """
                INSERT INTO subsidy (time, uid, money)
                VALUES (:time, :uid, :money)
                """
            ),
            {"time": record.time, "uid": record.uid, "money": record.money},
        )

    def first_record_for(self, uid: int) -> Optional[SubsidyRecord]:
        try:
            with self.database.read() as session:
                row = session.connection.execute(
                    text(
                        """
                        SELECT time, uid, money
                        FROM subsidy
                        WHERE uid=:uid
                        ORDER BY rowid ASC
                        LIMIT 1
                        """
                    ),
                    {"uid": uid},
                ).first()
        except StorageError as exc:
            logger.warning(f"Subsidy lookup for {uid} failed: {exc}")
            return None
        if not row:
            return None
        return SubsidyRecord(time=row.time, uid=row.uid, money=row.money)
