# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from screeps_build.config import BuildOptions
from screeps_build.errors import BuildError
from screeps_build.pipeline import build, check

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(verbosity: int) -> None:
	"""Configure the root logger unless the host application already did."""
	if verbosity >= 2:
		level = logging.DEBUG
	elif verbosity == 1:
		level = logging.INFO
	else:
		level = logging.WARNING
	root = logging.getLogger()
	if root.handlers:
		root.setLevel(level)
		return
	logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(
		prog="screeps-build",
		description="Build a Rust crate with cargo-web and repackage it for the Screeps runtime",
	)
	p.add_argument(
		"-v",
		"--verbose",
		action="count",
		default=0,
		help="Increase log verbosity (-v info, -vv debug)",
	)
	sub = p.add_subparsers(dest="cmd", required=True)

	for name, help_text in (
		("check", "Run 'cargo check' for the wasm32 target"),
		("build", "Run 'cargo web build' and write target/compiled.wasm + target/main.js"),
	):
		cmd = sub.add_parser(name, help=help_text)
		cmd.add_argument(
			"--root",
			type=Path,
			default=Path("."),
			help="Project root containing Cargo.toml (default: current directory)",
		)
		cmd.add_argument("--cargo", type=str, default="cargo", help="cargo executable to invoke (default: cargo)")
		if name == "build":
			cmd.add_argument("--json", action="store_true", help="Emit a machine-readable JSON report")
	return p


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)
	configure_logging(args.verbose)

	opts = BuildOptions(root=args.root, cargo=args.cargo)
	try:
		if args.cmd == "check":
			check(opts)
			return 0
		if args.cmd == "build":
			report = build(opts)
			if args.json:
				print(json.dumps(report.to_dict(), sort_keys=True, separators=(",", ":")))
			return 0
	except BuildError as err:
		print(f"error: {err.format_human()}", file=sys.stderr)
		return 2
	except (OSError, UnicodeDecodeError) as err:
		print(f"error: {err}", file=sys.stderr)
		return 2

	raise AssertionError("unreachable")
