from __future__ import annotations

from typing import Sequence

from ..domain.enums import Ecosystem
from ..domain.models import DependencyIdentity, RequestBatch

DEFAULT_BATCH_SIZE = 10


def slice_payload(
    items: Sequence[DependencyIdentity],
    ecosystem: Ecosystem,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[RequestBatch]:
    """Split items into ordered batches of at most batch_size."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [
        RequestBatch(ecosystem=ecosystem, items=tuple(items[i:i + batch_size]))
        for i in range(0, len(items), batch_size)
    ]
