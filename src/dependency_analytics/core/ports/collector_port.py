from __future__ import annotations

from typing import Awaitable, Protocol, Sequence, Union

from ..domain.models import Dependency

CollectResult = Union[Sequence[Dependency], Awaitable[Sequence[Dependency]]]


class CollectorPort(Protocol):
    def collect(self, contents: str) -> CollectResult:
        """Parse raw manifest text into dependencies.

        May return the list directly or an awaitable resolving to it. Raises
        ManifestParseError when the manifest cannot be parsed.
        """
        ...
