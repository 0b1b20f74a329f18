from __future__ import annotations

from pydantic import BaseModel

from ..core.domain.models import RequestBatch


class PackageVersion(BaseModel):
    """One package/version pair in a component-analyses request."""
    package: str
    version: str


class ComponentAnalysisRequest(BaseModel):
    """Body of POST /component-analyses."""
    ecosystem: str
    package_versions: list[PackageVersion]

    @classmethod
    def from_batch(cls, batch: RequestBatch) -> "ComponentAnalysisRequest":
        return cls.model_validate(batch.to_payload())
