import logging
from typing import Iterable, List, Optional

from src.wallet.domain.exceptions import InsufficientFundsError, InvalidAmountError
from src.wallet.domain.wallet import SubsidyRecord, Wallet
from src.wallet.observability.wallet_event_logger import WalletEventLogger
from src.wallet.store.balance_store import BalanceStore
from src.wallet.store.subsidy_ledger import SubsidyLedger
from src.wallet.store.wallet_database import WalletDatabase
from src.wallet.time.system_time_source import SystemTimeSource
from src.wallet.time.time_source import TimeSource

logger = logging.getLogger(__name__)


class WalletService:
    """
    Entry point for the host application.
    Owns the currency label and the public funds convention, and composes
    BalanceStore and SubsidyLedger into the disbursement transaction.
    Constructed once at start-up (see src.wallet.bootstrap) and passed around.
    """

    def __init__(
            self,
            database: WalletDatabase,
            balances: BalanceStore,
            ledger: SubsidyLedger,
            time_source: Optional[TimeSource] = None,
            wallet_name: str = "Atri币",
            public_funds_account: int = 0,
            events: Optional[WalletEventLogger] = None,
    ):
        if balances.database is not database or ledger.database is not database:
            raise ValueError("balance store and subsidy ledger must share the wallet database")
        self.database = database
        self.balances = balances
        self.ledger = ledger
        self.time_source = time_source or SystemTimeSource()
        self.events = events or WalletEventLogger()
        self._wallet_name = wallet_name
        self._public_funds_account = public_funds_account

    @classmethod
    def from_database(cls, database: WalletDatabase, **kwargs) -> "WalletService":
        return cls(database, BalanceStore(database), SubsidyLedger(database), **kwargs)

    # --- currency label ---

    def get_wallet_name(self) -> str:
        return self._wallet_name

    def set_wallet_name(self, name: str) -> None:
        previous = self._wallet_name
        self._wallet_name = name
        self.events.emit("wallet_renamed", previous=previous, current=name)

    # --- balances ---

    def get_balance(self, uid: int) -> int:
        return self.balances.get_balance(uid)

    def get_group_balances(self, uids: Iterable[int], descending: bool = True) -> List[Wallet]:
        return self.balances.get_group_balances(uids, descending)

    def adjust_balance(self, uid: int, delta: int) -> int:
        """
        delta > 0 credits, delta < 0 debits. The result floors at 0.
        Returns the new balance.
        """
        money = self.balances.adjust_balance(uid, delta)
        self.events.emit("balance_adjusted", uid=uid, delta=delta, balance=money)
        return money

    # --- public funds ---

    def get_public_funds_account_id(self) -> int:
        return self._public_funds_account

    def get_public_funds_balance(self) -> int:
        return self.balances.get_balance(self._public_funds_account)

    def adjust_public_funds(self, delta: int) -> int:
        return self.adjust_balance(self._public_funds_account, delta)

    # --- subsidies ---

    def issuance_poverty_subsidies(self, target: int, amount: int, source: Optional[int] = None) -> SubsidyRecord:
        """
        Moves `amount` from `source` (public funds by default) to `target` and
        logs a SubsidyRecord.

        Debit, record and credit run in one transaction under the exclusive
        balance lock. Raises InvalidAmountError for amount <= 0 and
        InsufficientFundsError when the source cannot cover it; both leave
        no trace. A StorageError rolls back every sub-step.
        """
        if amount <= 0:
            raise InvalidAmountError(amount)
        source_uid = self._public_funds_account if source is None else source
        with self.database.write() as session:
            record = SubsidyRecord(time=self.time_source.today(), uid=target, money=amount)
            available = self.balances.balance_in(session, source_uid)
            if available < amount:
                raise InsufficientFundsError(source_uid, available, amount)
            source_money = self.balances.adjust_in(session, source_uid, -amount)
            self.ledger.append_in(session, record)
            target_money = self.balances.adjust_in(session, target, amount)

        self.events.emit(
            "subsidy_issued",
            source=source_uid,
            target=target,
            amount=amount,
            date=record.time,
            source_balance=source_money,
            target_balance=target_money,
        )
        return record

    def first_subsidy_record_for(self, uid: int) -> Optional[SubsidyRecord]:
        return self.ledger.first_record_for(uid)
