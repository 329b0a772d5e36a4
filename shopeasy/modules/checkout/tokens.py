"""Process-wide record of checkout nonces that already placed an order.

The wizard state travels in the client's cookie, so a replayed or doubled
payment POST carries a nonce the server has to remember on its own.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Optional

from flask import Flask

DEFAULT_CAPACITY = 10000


class CheckoutTokens:
    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity = capacity
        self._spent: "OrderedDict[str, None]" = OrderedDict()
        self._lock = threading.Lock()

    def init_app(self, app: Flask) -> None:
        self.capacity = int(app.config.get("CHECKOUT_TOKEN_CAPACITY", self.capacity))
        app.extensions["shopeasy_checkout_tokens"] = self

    def is_spent(self, nonce: Optional[str]) -> bool:
        with self._lock:
            return nonce in self._spent

    def claim(self, nonce: str) -> bool:
        """Mark `nonce` spent. False when another submit got there first."""
        with self._lock:
            if nonce in self._spent:
                return False
            self._spent[nonce] = None
            while len(self._spent) > self.capacity:
                self._spent.popitem(last=False)
            return True

    def release(self, nonce: str) -> None:
        """Give the nonce back after a failed attempt so the shopper can retry."""
        with self._lock:
            self._spent.pop(nonce, None)
