"""Collector for Maven pom.xml files."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from ...core.domain.models import Dependency, Located
from ...core.errors import ManifestParseError
from ...shared.utils import position_at

_DEPENDENCY_RE = re.compile(r"<dependency>(.*?)</dependency>", re.DOTALL)


def _tag(name: str) -> re.Pattern[str]:
    return re.compile(rf"<{name}>\s*(.*?)\s*</{name}>", re.DOTALL)


_GROUP_RE = _tag("groupId")
_ARTIFACT_RE = _tag("artifactId")
_VERSION_RE = _tag("version")
_SCOPE_RE = _tag("scope")


class PomXmlCollector:
    """Reports ``groupId:artifactId`` for every non-test ``<dependency>``.

    The document is parsed once to reject malformed XML; positions come from
    the raw text because ElementTree does not keep them.
    """

    def collect(self, contents: str) -> list[Dependency]:
        try:
            ET.fromstring(contents)
        except ET.ParseError as e:
            line, _ = e.position
            raise ManifestParseError(f"Invalid pom.xml: {e}", line=line - 1) from e

        deps: list[Dependency] = []
        for block in _DEPENDENCY_RE.finditer(contents):
            body = block.group(1)
            offset = block.start(1)

            scope = _SCOPE_RE.search(body)
            if scope and scope.group(1) == "test":
                continue
            group = _GROUP_RE.search(body)
            artifact = _ARTIFACT_RE.search(body)
            if group is None or artifact is None:
                continue

            version = _VERSION_RE.search(body)
            if version is not None:
                version_text = version.group(1)
                version_offset = offset + version.start(1)
            else:
                version_text = ""
                version_offset = offset + artifact.end(1)

            deps.append(
                Dependency(
                    name=Located(
                        f"{group.group(1)}:{artifact.group(1)}",
                        position_at(contents, offset + group.start(1)),
                    ),
                    version=Located(version_text, position_at(contents, version_offset)),
                )
            )
        return deps
