from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder
from tests._fixtures.sample_project import build_sample_project
from uicontext.models import ProjectIndex


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def sample_project(project_builder: ProjectBuilder) -> ProjectBuilder:
    build_sample_project(project_builder)
    return project_builder


@pytest.fixture
def sample_index(sample_project: ProjectBuilder) -> ProjectIndex:
    return sample_project.index()
