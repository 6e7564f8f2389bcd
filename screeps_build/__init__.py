# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Screeps build stage for Rust crates compiled with `cargo web`.

Runs the external toolchain, locates the generated wasm + JS loader, and
rewrites the loader for the Screeps runtime. The CLI entrypoint is
`screeps_build.cli:main`.
"""

__all__ = ["artifacts", "config", "errors", "extract", "pipeline", "process", "template"]
