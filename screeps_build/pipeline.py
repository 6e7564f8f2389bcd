# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
check / build stages.

build: `cargo web build` -> locate `*.wasm` + `*.js` -> validate and rewrite
the loader -> write `target/compiled.wasm` and `target/main.js`.

Every validation runs before the first write, so a failed run leaves the
previous outputs untouched. The two outputs are replaced independently (each
atomically); that is fine for a local single-operator build step.
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from screeps_build.artifacts import scan
from screeps_build.config import (
	CATEGORY_JS,
	CATEGORY_WASM,
	EXTENSION_TO_CATEGORY,
	OUTPUT_JS_NAME,
	OUTPUT_WASM_NAME,
	REQUIRED_CATEGORIES,
	BuildOptions,
)
from screeps_build.errors import UnexpectedStructureError
from screeps_build.extract import process_loader
from screeps_build.process import Runner, build_command, check_command, execute

_log = logging.getLogger(__name__)


def sha256_hex(data: bytes) -> str:
	return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class BuildReport:
	wasm_path: Path
	js_path: Path
	wasm_sha256: str
	js_sha256: str

	def to_dict(self) -> dict[str, Any]:
		return {
			"ok": True,
			"wasm_path": str(self.wasm_path),
			"js_path": str(self.js_path),
			"wasm_sha256": f"sha256:{self.wasm_sha256}",
			"js_sha256": f"sha256:{self.js_sha256}",
		}


def _replace_file(path: Path, data: bytes) -> None:
	tmp = path.with_name(path.name + f".tmp.{os.getpid()}")
	try:
		tmp.write_bytes(data)
		os.replace(tmp, path)
	except BaseException:
		tmp.unlink(missing_ok=True)
		raise


def _copy_file(src: Path, dst: Path) -> None:
	tmp = dst.with_name(dst.name + f".tmp.{os.getpid()}")
	try:
		shutil.copyfile(src, tmp)
		os.replace(tmp, dst)
	except BaseException:
		tmp.unlink(missing_ok=True)
		raise


def _read_loader(path: Path) -> str:
	# no newline translation: \r\n must reach main.js unchanged
	try:
		return path.read_bytes().decode("utf-8", errors="strict")
	except UnicodeDecodeError as err:
		raise UnexpectedStructureError(
			message=f"'cargo web' generated JS that is not valid UTF-8: {err}",
			path=str(path),
		) from err


def package_artifacts(build_dir: Path, out_dir: Path) -> BuildReport:
	"""
	Turn a finished `cargo web` output directory into Screeps upload files.

	Nothing is written unless the directory holds exactly one `.wasm` and one
	`.js`, and the `.js` passes template validation.
	"""
	found = scan(build_dir, EXTENSION_TO_CATEGORY, required=REQUIRED_CATEGORIES)
	wasm_file = found[CATEGORY_WASM]
	generated_js = found[CATEGORY_JS]

	main_js = process_loader(str(generated_js), _read_loader(generated_js)).encode("utf-8")

	out_dir.mkdir(parents=True, exist_ok=True)
	wasm_out = out_dir / OUTPUT_WASM_NAME
	js_out = out_dir / OUTPUT_JS_NAME

	_log.debug("copying %s to %s", wasm_file, wasm_out)
	_copy_file(wasm_file, wasm_out)
	_log.debug("writing %s", js_out)
	_replace_file(js_out, main_js)

	return BuildReport(
		wasm_path=wasm_out,
		js_path=js_out,
		wasm_sha256=sha256_hex(wasm_out.read_bytes()),
		js_sha256=sha256_hex(main_js),
	)


def check(opts: BuildOptions, runner: Runner | None = None) -> None:
	_log.info("running check")
	execute(check_command(opts.root, opts.cargo), runner)


def build(opts: BuildOptions, runner: Runner | None = None) -> BuildReport:
	_log.info("building")
	execute(build_command(opts.root, opts.cargo), runner)
	report = package_artifacts(opts.build_dir, opts.out_dir)
	_log.info("wrote %s and %s", report.wasm_path, report.js_path)
	return report
