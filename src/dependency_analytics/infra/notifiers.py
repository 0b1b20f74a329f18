from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..core.domain.models import Diagnostic, ProgressNotification
from ..core.ports.notifier_port import NotifierPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorNotification:
    uri: str
    data: str


class RecordingNotifier(NotifierPort):
    """Keeps the live diagnostic set per document and the notification history.

    Used by the library client, where there is no editor to push to.
    """

    def __init__(self) -> None:
        self._diagnostics: dict[str, list[Diagnostic]] = {}
        self.progress: list[ProgressNotification] = []
        self.errors: list[ErrorNotification] = []

    def publish_diagnostics(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        self._diagnostics[uri] = list(diagnostics)

    def notify_progress(self, notification: ProgressNotification) -> None:
        logger.debug(f"{notification.uri}: {notification.data}")
        self.progress.append(notification)

    def notify_error(self, uri: str, data: str) -> None:
        self.errors.append(ErrorNotification(uri, data))

    def diagnostics(self, uri: str) -> list[Diagnostic]:
        return list(self._diagnostics.get(uri, ()))

    def last_summary(self, uri: str) -> str | None:
        for notification in reversed(self.progress):
            if notification.uri == uri and notification.done:
                return notification.data
        return None

    def forget(self, uri: str) -> None:
        self._diagnostics.pop(uri, None)
        self.progress = [p for p in self.progress if p.uri != uri]
        self.errors = [e for e in self.errors if e.uri != uri]
