from dataclasses import dataclass


@dataclass(frozen=True)
class Wallet:
    """
    Balance row of a single account.
    A missing row reads as Wallet(uid, 0); rows are never deleted.
    """
    uid: int
    money: int = 0


@dataclass(frozen=True)
class SubsidyRecord:
    """
    Immutable entry of the subsidy log.
    One per successful disbursement, append-only.
    """
    time: str  # calendar day, "YYYY-MM-DD"
    uid: int
    money: int
