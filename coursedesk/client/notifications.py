# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User notifications raised by the client state managers.

A UI layer plugs in its own Notifier (dialogs, toasts). The default
LoggingNotifier writes them to the structlog logger.
"""

from typing import Protocol

from coursedesk.utils.logging import get_logger


class Notifier(Protocol):
    """Receives progress and outcome messages for enrollment actions."""

    def loading(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str, detail: str | None = None) -> None: ...


class LoggingNotifier:
    """Notifier that logs every message."""

    def __init__(self, name: str = "coursedesk.client") -> None:
        self._logger = get_logger(name)

    def loading(self, message: str) -> None:
        self._logger.info("notify_loading", message=message)

    def success(self, message: str) -> None:
        self._logger.info("notify_success", message=message)

    def error(self, message: str, detail: str | None = None) -> None:
        self._logger.warning("notify_error", message=message, detail=detail)
