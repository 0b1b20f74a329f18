from __future__ import annotations

from typing import Protocol, Sequence

from ..domain.models import Diagnostic, ProgressNotification


class NotifierPort(Protocol):
    def publish_diagnostics(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Replace the full diagnostic set shown for uri."""

    def notify_progress(self, notification: ProgressNotification) -> None:
        """Send a progress/summary message (start and end of a cycle)."""

    def notify_error(self, uri: str, data: str) -> None:
        """Report that analysis of uri was aborted."""

    def forget(self, uri: str) -> None:
        """Release everything held for a closed document."""
