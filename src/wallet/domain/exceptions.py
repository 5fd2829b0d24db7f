class WalletError(Exception):
    """Base class for wallet errors."""
    pass


class InvalidAmountError(WalletError):
    """Raised when a non-positive amount is passed where a positive one is required."""

    def __init__(self, amount: int):
        super().__init__(f"amount must be positive, got {amount}")
        self.amount = amount


class InsufficientFundsError(WalletError):
    """Raised when the source account cannot cover a disbursement."""

    def __init__(self, uid: int, available: int, requested: int):
        super().__init__(
            f"account {uid} holds {available}, cannot disburse {requested}"
        )
        self.uid = uid
        self.available = available
        self.requested = requested


class StorageError(WalletError):
    """Underlying database read/write failure."""
    pass
