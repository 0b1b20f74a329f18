"""Collector for pip requirements.txt files."""

from __future__ import annotations

import re

from ...core.domain.models import Dependency, Located, Position
from ...core.errors import ManifestParseError

# name, optional [extras], then the raw version specifier
_REQ_RE = re.compile(
    r"^(?P<name>[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?)"
    r"\s*(?:\[[^\]]*\])?\s*"
    r"(?P<spec>.*)$"
)

_PIN_RE = re.compile(r"^==\s*(?P<version>[^\s,;]+)")


class RequirementsTxtCollector:
    """Pinned requirements (``name==version``) are reported with their version;
    any other requirement is reported with an empty version."""

    def collect(self, contents: str) -> list[Dependency]:
        deps: list[Dependency] = []
        for lineno, raw_line in enumerate(contents.splitlines()):
            line = raw_line.split("#", 1)[0].rstrip()
            stripped = line.strip()
            if not stripped:
                continue
            # Options (-r, -e, --index-url ...) and direct URLs are not queryable packages.
            if stripped.startswith("-") or "://" in stripped:
                continue

            m = _REQ_RE.match(stripped)
            if not m:
                raise ManifestParseError(f"Invalid requirement on line {lineno + 1}: {stripped!r}", line=lineno)

            indent = len(line) - len(line.lstrip())
            name = m.group("name")
            name_pos = Position(lineno, indent + m.start("name"))

            pin = _PIN_RE.match(m.group("spec"))
            if pin:
                version = pin.group("version")
                version_pos = Position(lineno, indent + m.start("spec") + pin.start("version"))
            else:
                version = ""
                version_pos = Position(lineno, indent + m.end("name"))

            deps.append(Dependency(name=Located(name, name_pos), version=Located(version, version_pos)))
        return deps
