# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class BuildError(Exception):
	"""
	A fatal build-stage error.

	Every failure aborts the stage; nothing is retried or recovered locally.
	`reason_code` is stable per subclass so callers can branch on it.
	"""

	reason_code: ClassVar[str] = "BUILD_ERROR"

	message: str
	path: str | None = None
	category: str | None = None
	command: str | None = None
	exit_code: int | None = None

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"path": self.path,
			"category": self.category,
			"command": self.command,
			"exit_code": self.exit_code,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.command:
			parts.append(f"command={self.command}")
		if self.exit_code is not None:
			parts.append(f"exit_code={self.exit_code}")
		if self.category:
			parts.append(f"category={self.category}")
		if self.path:
			parts.append(f"path={self.path}")
		return " ".join(parts)


class SpawnError(BuildError):
	reason_code = "SPAWN_FAILED"


class ExecutionError(BuildError):
	reason_code = "EXECUTION_FAILED"


class MissingArtifactError(BuildError):
	reason_code = "MISSING_ARTIFACT"


class AmbiguousArtifactError(BuildError):
	reason_code = "AMBIGUOUS_ARTIFACT"


class UnexpectedStructureError(BuildError):
	"""Generated loader text no longer has the shape this tool knows how to rewrite."""

	reason_code = "UNEXPECTED_STRUCTURE"


class MissingEntryPointError(BuildError):
	reason_code = "MISSING_ENTRY_POINT"
