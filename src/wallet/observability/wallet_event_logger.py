import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class WalletEventLogger:
    """
    Writes one JSON line per wallet event on the "wallet" logger:
    balance_adjusted (uid, delta, balance), subsidy_issued (source, target,
    amount, date, resulting balances) and wallet_renamed (previous, current).
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("wallet")

    def emit(self, event_type: str, **fields: Any) -> None:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
        }
        payload.update(fields)
        self._logger.info(json.dumps(payload, default=str, ensure_ascii=False))
