"""Tests for the project indexer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder
from uicontext.extractors import RegexFeatureExtractor, SourceFeatures
from uicontext.indexer import (
    ProjectIndexer,
    component_id,
    component_name,
    is_component_file,
    route_for,
)
from uicontext.models import ProjectIndex
from uicontext.stores import INDEX_FILENAME


def test_sample_project_components_and_pages(sample_index: ProjectIndex) -> None:
    assert sample_index.metadata.framework == "react"
    assert [c.id for c in sample_index.components] == [
        "src_components_Button",
        "src_components_Card",
        "src_components_UserList",
        "src_pages_Home",
        "src_pages_Users",
    ]
    assert sample_index.metadata.components_count == 5
    assert sample_index.metadata.pages_count == 2

    home, users = sample_index.pages
    assert (home.id, home.name, home.route) == ("src_pages_Home", "Home", "/")
    assert home.components == ["Card", "Button"]
    assert (users.route, users.components) == ("/users", ["UserList"])


def test_component_features_are_extracted(sample_index: ProjectIndex) -> None:
    button = sample_index.components[0]

    assert button.name == "Button"
    assert button.file_path == "src/components/Button.tsx"
    assert button.description == "Primary action button"
    assert button.imports == ["react"]
    assert button.tags == ["interactive", "styled"]
    assert [(p.name, p.type, p.required, p.default_value) for p in button.props] == [
        ("label", "string", True, None),
        ("onClick", "() => void", False, None),
        ("disabled", "boolean", False, "false"),
    ]
    assert button.last_modified is not None


def test_pages_link_back_to_components(sample_index: ProjectIndex) -> None:
    used_in = {c.name: c.used_in for c in sample_index.components}

    assert used_in["Button"] == ["src_pages_Home"]
    assert used_in["Card"] == ["src_pages_Home"]
    assert used_in["UserList"] == ["src_pages_Users"]
    assert used_in["Home"] == []


def test_index_project_writes_artifact(sample_project: ProjectBuilder) -> None:
    index = sample_project.index()

    artifact = sample_project.path() / INDEX_FILENAME
    data = json.loads(artifact.read_text(encoding="utf-8"))
    assert data["metadata"]["componentsCount"] == len(index.components)
    assert data["components"][0]["filePath"] == "src/components/Button.tsx"
    assert data["components"][0]["props"][2]["defaultValue"] == "false"
    assert "defaultValue" not in data["components"][0]["props"][0]


def test_reindexing_is_deterministic(sample_project: ProjectBuilder) -> None:
    first = sample_project.index().to_dict()
    second = sample_project.index().to_dict()

    first["metadata"].pop("lastIndexed")
    second["metadata"].pop("lastIndexed")
    assert first == second


@pytest.mark.parametrize(
    ("dependencies", "dev_dependencies", "expected"),
    [
        ({"vue": "^3.0.0"}, {}, "vue"),
        ({}, {"@angular/core": "^17.0.0"}, "angular"),
        ({"react": "^18.0.0", "vue": "^3.0.0"}, {}, "react"),
        ({"lodash": "^4.0.0"}, {}, "unknown"),
    ],
)
def test_detect_framework(
    project_builder: ProjectBuilder,
    dependencies: dict[str, str],
    dev_dependencies: dict[str, str],
    expected: str,
) -> None:
    project_builder.package_json(dependencies, devDependencies=dev_dependencies)

    assert ProjectIndexer(project_builder.path()).detect_framework() == expected


def test_missing_package_json_means_unknown_framework(project_builder: ProjectBuilder) -> None:
    project_builder.write({"src/Widget.tsx": "export const Widget = () => null;\n"})

    index = project_builder.index()

    assert index.metadata.framework == "unknown"
    assert [c.name for c in index.components] == ["Widget"]


def test_discovery_skips_non_components_and_ignored_dirs(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/Header.jsx": "export default function Header() { return null; }\n",
            "src/nav-component.js": "export const nav = 1;\n",
            "src/utils.ts": "export const add = (a, b) => a + b;\n",
            "src/Styles.css": ".a {}\n",
            "src/node_modules/Lib.tsx": "export const Lib = 1;\n",
            "src/.cache/Hidden.tsx": "export const Hidden = 1;\n",
        }
    )

    index = project_builder.index()

    assert [c.id for c in index.components] == ["src_Header", "src_nav-component"]
    assert index.pages == []


def test_exclude_paths_from_config(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            ".uicontext.yml": """
                indexer:
                  exclude_paths: ["legacy/", "*.stories.tsx"]
            """,
            "src/Button.tsx": "export const Button = () => null;\n",
            "src/Button.stories.tsx": "export default {};\n",
            "src/legacy/OldButton.tsx": "export const OldButton = () => null;\n",
        }
    )

    index = project_builder.index()

    assert [c.name for c in index.components] == ["Button"]


def test_invalid_config_falls_back_to_defaults(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            ".uicontext.yml": "indexer: [broken\n",
            "src/Button.tsx": "export const Button = () => null;\n",
        }
    )

    index = project_builder.index()

    assert [c.name for c in index.components] == ["Button"]


def test_build_rejects_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(NotADirectoryError):
        ProjectIndexer(tmp_path / "missing").build()


def test_path_helpers() -> None:
    assert component_id("src/components/Button.tsx") == "src_components_Button"
    assert component_id("src\\ui\\Card.vue") == "src_ui_Card"
    assert component_id("src/widgets/Chart.test.tsx") == "src_widgets_Chart.test"
    assert component_name("Modal.vue") == "Modal"
    assert route_for("Index") == "/"
    assert route_for("About") == "/about"
    assert is_component_file("Button.tsx")
    assert is_component_file("my-component.vue")
    assert not is_component_file("helpers.ts")
    assert not is_component_file("Button.css")
    assert not is_component_file("Button.tsx", [".vue"])


class _FailingExtractor(RegexFeatureExtractor):
    def extract(self, source: str, *, component_name: str, file_path: str) -> SourceFeatures:
        if file_path == "src/Bad.tsx":
            raise ValueError("unparsable component")
        return super().extract(source, component_name=component_name, file_path=file_path)

    def used_components(self, source: str) -> list[str]:
        if "<Broken" in source:
            raise ValueError("unparsable page")
        return super().used_components(source)


def test_extractor_failure_skips_only_that_file(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/Bad.tsx": "export const Bad = () => null;\n",
            "src/Good.tsx": "export const Good = () => null;\n",
            "src/pages/Broken.tsx": "export default () => <Broken />;\n",
            "src/pages/Home.tsx": "export default () => <Good />;\n",
        }
    )

    index = ProjectIndexer(project_builder.path(), extractor=_FailingExtractor()).build()

    assert [c.name for c in index.components] == ["Good", "Broken", "Home"]
    assert [p.name for p in index.pages] == ["Home"]
    assert index.metadata.components_count == 3
    assert next(c for c in index.components if c.name == "Good").used_in == ["src_pages_Home"]
