"""
Console funds dispatcher adapter - Implements FundsDispatcher protocol.

This module provides a console-based implementation of the domain's
payment rail port, logging outbound sends for demo purposes.
"""

import logging

from src.domain.models import BankSend

logger = logging.getLogger(__name__)


class ConsoleFundsDispatcher:
    """
    Implements FundsDispatcher protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - settlement is simulated by a log line.
    """

    def dispatch(self, send: BankSend) -> None:
        """
        Log an outbound send (simulates handing it to the payment rail).

        Args:
            send: Destination address and coins to transfer
        """
        amount = ",".join(str(coin) for coin in send.amount)
        logger.info("[BANK SEND] To: %s Amount: %s", send.to_address, amount)
