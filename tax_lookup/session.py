# tax_lookup/session.py
"""Password gate kept in a per-tab session mapping.

This is a UX deterrent only: the password lives in the app's own
configuration and is compared in plain memory.
"""
from __future__ import annotations

import logging
from typing import MutableMapping, Optional

from . import config

_LOGGER = logging.getLogger(__name__)


class SessionGate:
    def __init__(
        self,
        storage: MutableMapping,
        password: Optional[str] = None,
        key: str = config.SESSION_KEY,
    ) -> None:
        # storage is st.session_state in the UI, a plain dict elsewhere
        self.storage = storage
        self.password = config.APP_PASSWORD if password is None else password
        self.key = key

    @property
    def is_authenticated(self) -> bool:
        return self.storage.get(self.key) is True

    def authenticate(self, candidate: str) -> bool:
        if candidate == self.password:
            self.storage[self.key] = True
            self.storage[config.LOGIN_ERROR_KEY] = False
            _LOGGER.info("Session unlocked")
            return True

        self.storage[config.LOGIN_ERROR_KEY] = True
        _LOGGER.info("Rejected password attempt")
        return False

    def consume_login_error(self) -> bool:
        """Return the pending wrong-password flag and clear it."""
        return bool(self.storage.pop(config.LOGIN_ERROR_KEY, False))

    def logout(self) -> None:
        self.storage.pop(self.key, None)
        self.storage.pop(config.LOGIN_ERROR_KEY, None)
