"""Client-side session token storage.

The store is advisory only: holding a token says nothing about whether the
server will still accept it.
"""

import logging
from collections.abc import MutableMapping

logger = logging.getLogger("hundred_networks.client")

TOKEN_KEY = "hn_auth_token"


class SessionStore:
    """Keeps the session token in a key-value storage, if one is available.

    Without a storage every operation is a no-op and ``read`` returns None.
    """

    def __init__(self, storage: MutableMapping[str, str] | None = None, key: str = TOKEN_KEY) -> None:
        self.storage = storage
        self.key = key

    def store(self, token: str) -> None:
        if self.storage is None:
            logger.debug("No session storage available, token not stored")
            return
        self.storage[self.key] = token

    def clear(self) -> None:
        if self.storage is None:
            return
        self.storage.pop(self.key, None)

    def read(self) -> str | None:
        if self.storage is None:
            return None
        return self.storage.get(self.key)

    def is_authenticated(self) -> bool:
        return self.read() is not None
