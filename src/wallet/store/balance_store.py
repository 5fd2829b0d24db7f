import logging
from typing import Iterable, List

from sqlalchemy import bindparam, text

from src.wallet.domain.exceptions import StorageError
from src.wallet.domain.wallet import Wallet
from src.wallet.store.wallet_database import ReadSession, WalletDatabase, WriteSession, require_write

logger = logging.getLogger(__name__)


class BalanceStore:
    """
    Account -> integer balance, one row per account in the `storage` table.
    Balances never go below zero: every write goes through a clamp.
    """

    def __init__(self, database: WalletDatabase):
        self.database = database
        self.ensure_schema()

    def ensure_schema(self) -> None:
        with self.database.write() as session:
            session.connection.execute(
                text(
                    """
                    CREATE TABLE IF NOT EXISTS storage (
                        uid INTEGER UNIQUE,
                        money INTEGER
                    )
                    """
                )
            )

    # --- locking operations ---

    def get_balance(self, uid: int) -> int:
        try:
            with self.database.read() as session:
                return self.balance_in(session, uid)
        except StorageError as exc:
            logger.warning(f"Balance lookup for {uid} failed, reading as 0: {exc}")
            return 0

    def get_group_balances(self, uids: Iterable[int], descending: bool = True) -> List[Wallet]:
        wanted = sorted(set(uids))
        if not wanted:
            return []
        order = "DESC" if descending else "ASC"
        query = text(
            f"""
            SELECT uid, money
            FROM storage
            WHERE uid IN :uids
            ORDER BY money {order}, uid ASC
            """
        ).bindparams(bindparam("uids", expanding=True))
        with self.database.read() as session:
            rows = session.connection.execute(query, {"uids": wanted}).fetchall()
        return [Wallet(uid=row.uid, money=row.money) for row in rows]

    def adjust_balance(self, uid: int, delta: int) -> int:
        with self.database.write() as session:
            return self.adjust_in(session, uid, delta)

    # --- session-scoped primitives, only reachable with the lock held ---

    def balance_in(self, session: ReadSession, uid: int) -> int:
        row = session.connection.execute(
            text("SELECT money FROM storage WHERE uid=:uid"),
            {"uid": uid},
        ).first()
        if not row or row.money is None:
            return 0
        return int(row.money)

    def replace_in(self, session: WriteSession, uid: int, money: int) -> None:
        require_write(session).connection.execute(
            text(
                """
                INSERT INTO storage (uid, money)
                VALUES (:uid, :money)
                ON CONFLICT (uid)
                DO UPDATE SET money=excluded.money
                """
            ),
            {"uid": uid, "money": max(0, money)},
        )

    def adjust_in(self, session: WriteSession, uid: int, delta: int) -> int:
        require_write(session)
        new_money = max(0, self.balance_in(session, uid) + delta)
        self.replace_in(session, uid, new_money)
        return new_money
