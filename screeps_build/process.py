# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
External toolchain invocation.

The child process inherits our stdout/stderr so the operator sees cargo's
progress live; only the exit status is inspected. There is no timeout: a hung
toolchain hangs the build until the operator interrupts it.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from screeps_build.config import BUILD_ARGS, CHECK_ARGS
from screeps_build.errors import ExecutionError, SpawnError

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandSpec:
	program: str
	args: tuple[str, ...]
	cwd: Path

	@property
	def argv(self) -> list[str]:
		return [self.program, *self.args]

	def display(self) -> str:
		return " ".join(self.argv)


@dataclass(frozen=True)
class ExecutionResult:
	success: bool
	exit_code: int


class Runner(Protocol):
	def run(self, spec: CommandSpec) -> ExecutionResult:
		"""
		Run `spec` to completion.

		Implementations raise OSError when the program cannot be started and
		report non-zero exits through the result, not by raising.
		"""
		...


class SubprocessRunner:
	def run(self, spec: CommandSpec) -> ExecutionResult:
		completed = subprocess.run(spec.argv, cwd=spec.cwd, check=False)
		return ExecutionResult(success=completed.returncode == 0, exit_code=completed.returncode)


def check_command(root: Path, cargo: str = "cargo") -> CommandSpec:
	return CommandSpec(program=cargo, args=CHECK_ARGS, cwd=root)


def build_command(root: Path, cargo: str = "cargo") -> CommandSpec:
	return CommandSpec(program=cargo, args=BUILD_ARGS, cwd=root)


def execute(spec: CommandSpec, runner: Runner | None = None) -> ExecutionResult:
	"""
	Run an external command and require a zero exit status.

	Raises:
	  SpawnError: the program could not be started (missing binary, permissions).
	  ExecutionError: the program ran and exited non-zero. Never retried; a
	    failed cargo build may leave partial state behind.
	"""
	runner = runner if runner is not None else SubprocessRunner()
	shown = spec.display()
	_log.debug("running '%s' in %s", shown, spec.cwd)
	try:
		result = runner.run(spec)
	except OSError as err:
		raise SpawnError(
			message=f"failed to start '{spec.program}': {err.strerror or err}",
			command=shown,
		) from err
	if not result.success:
		raise ExecutionError(
			message=f"'{shown}' exited with a non-zero exit code: {result.exit_code}",
			command=shown,
			exit_code=result.exit_code,
		)
	_log.debug("finished '%s'", shown)
	return result
