from __future__ import annotations

from typing import Iterable, Optional

from ..domain.models import CodeAction, Diagnostic

Anchor = tuple[int, int]


class CodeActionIndex:
    """Quick fixes for one document, keyed by the anchor of their diagnostic."""

    def __init__(self) -> None:
        self._actions: dict[Anchor, CodeAction] = {}

    def register(self, diagnostic: Diagnostic, action: CodeAction) -> None:
        self._actions[diagnostic.anchor] = action

    def lookup(self, diagnostic: Diagnostic) -> Optional[CodeAction]:
        return self._actions.get(diagnostic.anchor)

    def __len__(self) -> int:
        return len(self._actions)


class CodeActionRegistry:
    """Holds the live CodeActionIndex of every document.

    An index is replaced wholesale when a new cycle starts for its document, so
    fixes from a superseded cycle can never be served.
    """

    def __init__(self) -> None:
        self._indexes: dict[str, CodeActionIndex] = {}

    def reset(self, uri: str) -> CodeActionIndex:
        index = CodeActionIndex()
        self._indexes[uri] = index
        return index

    def discard(self, uri: str) -> None:
        self._indexes.pop(uri, None)

    def actions_for(self, uri: str, diagnostics: Iterable[Diagnostic]) -> list[CodeAction]:
        index = self._indexes.get(uri)
        if index is None:
            return []
        actions: list[CodeAction] = []
        for diagnostic in diagnostics:
            action = index.lookup(diagnostic)
            if action is not None:
                actions.append(action)
        return actions
