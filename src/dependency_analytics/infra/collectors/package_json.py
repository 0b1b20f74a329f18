"""Collector for npm package.json files."""

from __future__ import annotations

import json
import re

from ...core.domain.models import Dependency, Located
from ...core.errors import ManifestParseError
from ...shared.utils import position_at

_DEPENDENCIES_RE = re.compile(r'"dependencies"\s*:\s*\{')


class PackageJsonCollector:
    """Reads the top-level ``dependencies`` object; versions are taken verbatim."""

    def collect(self, contents: str) -> list[Dependency]:
        try:
            data = json.loads(contents)
        except json.JSONDecodeError as e:
            raise ManifestParseError(f"Invalid package.json: {e.msg} (line {e.lineno})", line=e.lineno - 1) from e
        if not isinstance(data, dict):
            raise ManifestParseError("package.json must contain a JSON object")

        declared = data.get("dependencies") or {}
        if not isinstance(declared, dict):
            raise ManifestParseError('"dependencies" in package.json must be an object')
        if not declared:
            return []

        block = _DEPENDENCIES_RE.search(contents)
        cursor = block.end() if block else 0

        deps: list[Dependency] = []
        for name, version in declared.items():
            if not isinstance(version, str):
                raise ManifestParseError(f'Version of "{name}" in package.json must be a string')
            entry = re.compile(r'"%s"\s*:\s*"' % re.escape(name))
            m = entry.search(contents, cursor)
            if m is None:
                m = entry.search(contents)
            if m is None:
                name_offset = version_offset = cursor
            else:
                name_offset = m.start() + 1
                version_offset = m.end()
                cursor = m.end()
            deps.append(
                Dependency(
                    name=Located(name, position_at(contents, name_offset)),
                    version=Located(version, position_at(contents, version_offset)),
                )
            )
        return deps
