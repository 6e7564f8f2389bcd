# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Locate the toolchain's generated artifacts in a build-output directory.

`cargo web` is expected to emit exactly one artifact of each kind per build.
Anything else means a multi-target build (or stale output) and is reported
instead of guessed at.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from screeps_build.errors import AmbiguousArtifactError, MissingArtifactError

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateFile:
	path: Path
	category: str | None  # None: unrecognized extension, ignored


def classify(directory: Path, extension_to_category: Mapping[str, str]) -> list[CandidateFile]:
	candidates: list[CandidateFile] = []
	for entry in sorted(directory.iterdir()):
		if not entry.is_file():
			continue
		candidates.append(CandidateFile(path=entry, category=extension_to_category.get(entry.suffix)))
	return candidates


def scan(
	directory: Path,
	extension_to_category: Mapping[str, str],
	required: Iterable[str] | None = None,
) -> dict[str, Path]:
	"""
	Map each artifact category to the single file of that kind in `directory`.

	Args:
	  directory: build-output directory to scan (not recursive).
	  extension_to_category: suffix (with dot) -> category name.
	  required: categories that must be present; defaults to every mapped category.

	Raises:
	  AmbiguousArtifactError: more than one file for a category.
	  MissingArtifactError: a required category has no file (or the directory is missing).
	"""
	required_list = list(required) if required is not None else sorted(set(extension_to_category.values()))
	if not directory.is_dir():
		raise MissingArtifactError(
			message=f"build output directory {directory} does not exist",
			path=str(directory),
			category=required_list[0] if required_list else None,
		)

	found: dict[str, Path] = {}
	for cand in classify(directory, extension_to_category):
		if cand.category is None:
			_log.debug("ignoring %s", cand.path.name)
			continue
		if cand.category in found:
			raise AmbiguousArtifactError(
				message=f"multiple {cand.category} files found in {directory}",
				path=str(directory),
				category=cand.category,
			)
		found[cand.category] = cand.path

	for category in required_list:
		if category not in found:
			raise MissingArtifactError(
				message=f"no {category} files found in {directory}",
				path=str(directory),
				category=category,
			)
	return found
