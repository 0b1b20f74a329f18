from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.domain.enums import Ecosystem
from ..core.ports.collector_port import CollectorPort
from ..infra.collectors.go_mod import GoModCollector
from ..infra.collectors.package_json import PackageJsonCollector
from ..infra.collectors.pom_xml import PomXmlCollector
from ..infra.collectors.requirements_txt import RequirementsTxtCollector
from ..shared.utils import file_name_from_uri

logger = logging.getLogger(__name__)

CollectorFactory = Callable[[], CollectorPort]


@dataclass(frozen=True)
class ManifestHandler:
    pattern: re.Pattern[str]
    ecosystem: Ecosystem
    collector_factory: CollectorFactory

    def matches(self, file_name: str) -> bool:
        return self.pattern.search(file_name) is not None


class ManifestHandlerRegistry:
    """Maps manifest file names to their ecosystem and collector.

    The first registered pattern matching a document's file name wins.
    """

    def __init__(self) -> None:
        self._handlers: list[ManifestHandler] = []

    def on(self, pattern: str, ecosystem: Ecosystem, collector_factory: CollectorFactory) -> "ManifestHandlerRegistry":
        self._handlers.append(ManifestHandler(re.compile(pattern), ecosystem, collector_factory))
        return self

    def match(self, uri: str) -> Optional[ManifestHandler]:
        file_name = file_name_from_uri(uri)
        for handler in self._handlers:
            if handler.matches(file_name):
                return handler
        logger.debug(f"No manifest handler for {file_name!r}")
        return None

    def handlers(self) -> list[ManifestHandler]:
        return list(self._handlers)


def default_handlers() -> ManifestHandlerRegistry:
    return (
        ManifestHandlerRegistry()
        .on(r"^package\.json$", Ecosystem.NPM, PackageJsonCollector)
        .on(r"^pom\.xml$", Ecosystem.MAVEN, PomXmlCollector)
        .on(r"^requirements\.txt$", Ecosystem.PYPI, RequirementsTxtCollector)
        .on(r"^go\.mod$", Ecosystem.GOLANG, GoModCollector)
    )
