"""Authenticated identity of the current client.

The store wraps any mutable string mapping; in the running app that is the
Flask session cookie, in tests a plain dict. Only two keys are owned here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, MutableMapping, Optional, Union

from shopeasy.app.models import User

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticated:
    user: User
    token: str


SessionState = Union[Anonymous, Authenticated]


class SessionStore:
    def __init__(
        self,
        storage: MutableMapping[str, str],
        on_logout: Optional[Callable[[], None]] = None,
    ) -> None:
        self._storage = storage
        self._on_logout = on_logout
        self._state: SessionState = Anonymous()
        self.epoch = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return isinstance(self._state, Authenticated)

    @property
    def user(self) -> Optional[User]:
        return self._state.user if isinstance(self._state, Authenticated) else None

    @property
    def token(self) -> Optional[str]:
        return self._state.token if isinstance(self._state, Authenticated) else None

    def restore(self) -> SessionState:
        try:
            token = self._storage.get(TOKEN_KEY)
            raw_user = self._storage.get(USER_KEY)
            if token and raw_user:
                self._state = Authenticated(user=User.from_dict(json.loads(raw_user)), token=token)
            else:
                self._state = Anonymous()
        except (OSError, TypeError, ValueError) as exc:
            logger.info("Discarding unreadable stored session: %s", exc)
            self._state = Anonymous()
        return self._state

    def login(self, user: User, token: str) -> SessionState:
        self._storage[TOKEN_KEY] = token
        self._storage[USER_KEY] = json.dumps(user.to_dict())
        self._state = Authenticated(user=user, token=token)
        self.epoch += 1
        return self._state

    def logout(self) -> SessionState:
        self._storage.pop(TOKEN_KEY, None)
        self._storage.pop(USER_KEY, None)
        self._state = Anonymous()
        self.epoch += 1
        if self._on_logout is not None:
            self._on_logout()
        return self._state
