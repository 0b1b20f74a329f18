from __future__ import annotations

import textwrap

import pytest

from dependency_analytics.core.domain.models import Position
from dependency_analytics.core.errors import ManifestParseError
from dependency_analytics.infra.collectors.go_mod import GoModCollector
from dependency_analytics.infra.collectors.package_json import PackageJsonCollector
from dependency_analytics.infra.collectors.pom_xml import PomXmlCollector
from dependency_analytics.infra.collectors.requirements_txt import RequirementsTxtCollector


def _pairs(deps) -> list[tuple[str, str]]:
    return [(d.name.value, d.version.value) for d in deps]


# --- package.json ---

PACKAGE_JSON = textwrap.dedent(
    """\
    {
      "name": "app",
      "version": "1.0.0",
      "dependencies": {
        "lodash": "4.17.20",
        "react": "^16.0.0"
      },
      "devDependencies": {
        "lodash": "4.17.21"
      }
    }
    """
)


def test_package_json_positions():
    deps = PackageJsonCollector().collect(PACKAGE_JSON)
    assert _pairs(deps) == [("lodash", "4.17.20"), ("react", "^16.0.0")]
    assert deps[0].name.position == Position(4, 5)
    assert deps[0].version.position == Position(4, 15)
    assert deps[1].version.position == Position(5, 14)


def test_package_json_without_dependencies():
    assert PackageJsonCollector().collect('{"name": "x"}') == []


def test_package_json_invalid_json_reports_line():
    with pytest.raises(ManifestParseError) as exc_info:
        PackageJsonCollector().collect('{\n  "dependencies": {\n    "a": 1.0.0\n  }\n}')
    assert exc_info.value.line == 2


@pytest.mark.parametrize("text", ["[]", '{"dependencies": []}', '{"dependencies": {"a": 1}}'])
def test_package_json_rejects_wrong_shapes(text):
    with pytest.raises(ManifestParseError):
        PackageJsonCollector().collect(text)


# --- pom.xml ---

POM_XML = textwrap.dedent(
    """\
    <project>
      <dependencies>
        <dependency>
          <groupId>org.apache.commons</groupId>
          <artifactId>commons-text</artifactId>
          <version>1.9</version>
        </dependency>
        <dependency>
          <groupId>junit</groupId>
          <artifactId>junit</artifactId>
          <version>4.12</version>
          <scope>test</scope>
        </dependency>
        <dependency>
          <groupId>com.example</groupId>
          <artifactId>managed</artifactId>
        </dependency>
      </dependencies>
    </project>
    """
)


def test_pom_xml_collects_non_test_dependencies():
    deps = PomXmlCollector().collect(POM_XML)
    assert _pairs(deps) == [("org.apache.commons:commons-text", "1.9"), ("com.example:managed", "")]
    assert deps[0].name.position == Position(3, 15)
    assert deps[0].version.position == Position(5, 15)


def test_pom_xml_malformed():
    with pytest.raises(ManifestParseError) as exc_info:
        PomXmlCollector().collect("<project>\n  <dependencies>\n</project>")
    assert exc_info.value.line == 2


# --- requirements.txt ---

REQUIREMENTS = textwrap.dedent(
    """\
    # production deps
    Django==1.11.1
    requests[security] == 2.20.0  # pinned
    flask>=1.0

    -r other.txt
    git+https://github.com/a/b.git#egg=b
    """
)


def test_requirements_txt():
    deps = RequirementsTxtCollector().collect(REQUIREMENTS)
    assert _pairs(deps) == [("Django", "1.11.1"), ("requests", "2.20.0"), ("flask", "")]
    assert deps[0].name.position == Position(1, 0)
    assert deps[0].version.position == Position(1, 8)
    assert deps[1].version.position == Position(2, 22)
    assert deps[2].version.position == Position(3, 5)


def test_requirements_txt_invalid_line():
    with pytest.raises(ManifestParseError) as exc_info:
        RequirementsTxtCollector().collect("django==1.0\n==2.0\n")
    assert exc_info.value.line == 1


# --- go.mod ---

GO_MOD = textwrap.dedent(
    """\
    module example.com/app

    go 1.21

    require github.com/single/dep v1.0.0

    require (
    \tgithub.com/a/b v2.0.0+incompatible
    \tgolang.org/x/text v0.3.0 // indirect
    \tgithub.com/local/mod v1.2.3
    )

    replace golang.org/x/text v0.3.0 => golang.org/x/text v0.3.8

    replace github.com/local/mod => ../mod

    retract (
    \tv0.9.0
    )
    """
)


def test_go_mod_requires_and_replacements():
    deps = GoModCollector().collect(GO_MOD)
    assert _pairs(deps) == [
        ("github.com/single/dep", "v1.0.0"),
        ("github.com/a/b", "v2.0.0+incompatible"),
        ("golang.org/x/text", "v0.3.8"),
        ("github.com/local/mod", "v1.2.3"),
    ]
    assert deps[0].name.position == Position(4, 8)
    assert deps[0].version.position == Position(4, 30)
    assert deps[2].version.position == Position(8, 19)


def test_go_mod_malformed_require():
    with pytest.raises(ManifestParseError) as exc_info:
        GoModCollector().collect("module x\n\nrequire github.com/a/b\n")
    assert exc_info.value.line == 2


def test_go_mod_unterminated_block():
    with pytest.raises(ManifestParseError):
        GoModCollector().collect("require (\n\tgithub.com/a/b v1.0.0\n")
