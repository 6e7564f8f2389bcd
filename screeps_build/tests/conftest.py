# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest

from screeps_build.config import BUILD_OUTPUT_DIR


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
	root = tmp_path / "bot"
	(root / BUILD_OUTPUT_DIR).mkdir(parents=True)
	(root / "Cargo.toml").write_text('[package]\nname = "my_bot"\n', encoding="utf-8")
	return root


@pytest.fixture
def build_dir(project_root: Path) -> Path:
	return project_root / BUILD_OUTPUT_DIR
