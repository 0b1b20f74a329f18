"""Collector for Go module go.mod files."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ...core.domain.models import Dependency, Located, Position
from ...core.errors import ManifestParseError

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\S+")


@dataclass(frozen=True)
class _Replacement:
    path: str
    version: str


def _tokens(line: str) -> list[tuple[str, int]]:
    return [(m.group(0), m.start()) for m in _TOKEN_RE.finditer(line)]


class GoModCollector:
    """Collects ``require`` entries, honouring module-to-module ``replace`` directives.

    Local path replacements (``=> ../foo``) carry no version and are skipped.
    Other directives (``module``, ``go``, ``exclude``, ``retract`` ...) are ignored.
    """

    def collect(self, contents: str) -> list[Dependency]:
        requires: list[Dependency] = []
        replaces: dict[tuple[str, Optional[str]], _Replacement] = {}

        block: Optional[str] = None
        for lineno, raw_line in enumerate(contents.splitlines()):
            line = raw_line.split("//", 1)[0]
            tokens = _tokens(line)
            if not tokens:
                continue

            if block is not None:
                if tokens[0][0] == ")":
                    block = None
                    continue
                self._directive(block, tokens, lineno, requires, replaces)
                continue

            keyword = tokens[0][0]
            rest = tokens[1:]
            if rest and rest[0][0] == "(":
                if len(rest) > 1:
                    raise ManifestParseError(f"Unexpected text after '(' on line {lineno + 1}", line=lineno)
                block = keyword
                continue
            self._directive(keyword, rest, lineno, requires, replaces)

        if block is not None:
            raise ManifestParseError(f"Unterminated '{block} (' block in go.mod")

        return [self._apply(dep, replaces) for dep in requires]

    def _directive(
        self,
        keyword: str,
        tokens: list[tuple[str, int]],
        lineno: int,
        requires: list[Dependency],
        replaces: dict[tuple[str, Optional[str]], _Replacement],
    ) -> None:
        if keyword == "require":
            if len(tokens) < 2:
                raise ManifestParseError(f"Malformed require on line {lineno + 1}", line=lineno)
            (name, name_char), (version, version_char) = tokens[0], tokens[1]
            requires.append(
                Dependency(
                    name=Located(name, Position(lineno, name_char)),
                    version=Located(version, Position(lineno, version_char)),
                )
            )
        elif keyword == "replace":
            words = [t for t, _ in tokens]
            if "=>" not in words:
                raise ManifestParseError(f"Malformed replace on line {lineno + 1}", line=lineno)
            arrow = words.index("=>")
            old, new = words[:arrow], words[arrow + 1:]
            if len(old) not in (1, 2) or len(new) not in (1, 2):
                raise ManifestParseError(f"Malformed replace on line {lineno + 1}", line=lineno)
            if len(new) == 1:
                logger.debug(f"Skipping local replacement of {old[0]} on line {lineno + 1}")
                return
            replaces[(old[0], old[1] if len(old) == 2 else None)] = _Replacement(new[0], new[1])

    @staticmethod
    def _apply(dep: Dependency, replaces: dict[tuple[str, Optional[str]], _Replacement]) -> Dependency:
        name, version = dep.name.value, dep.version.value
        repl = replaces.get((name, version)) or replaces.get((name, None))
        if repl is None:
            return dep
        # Positions stay on the require line; that is where the user edits.
        return Dependency(
            name=Located(repl.path, dep.name.position),
            version=Located(repl.version, dep.version.position),
        )
