# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fixed contract with the external toolchain (`cargo web`, stdweb output) and
the Screeps host runtime.

All template text, command vectors and output names live here. The matcher
and assembler read them from this module only; editing one of these values is
how the wrapper is updated for a new stdweb release.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

TARGET = "wasm32-unknown-unknown"

CHECK_ARGS: tuple[str, ...] = ("check", f"--target={TARGET}")
BUILD_ARGS: tuple[str, ...] = ("web", "build", f"--target={TARGET}", "--release")

# Relative to the project root.
BUILD_OUTPUT_DIR = Path("target") / TARGET / "release"
OUTPUT_DIR = Path("target")
OUTPUT_WASM_NAME = "compiled.wasm"
OUTPUT_JS_NAME = "main.js"

CATEGORY_WASM = "wasm"
CATEGORY_JS = "js"

EXTENSION_TO_CATEGORY: Mapping[str, str] = MappingProxyType(
	{
		".wasm": CATEGORY_WASM,
		".js": CATEGORY_JS,
	}
)
REQUIRED_CATEGORIES: tuple[str, ...] = (CATEGORY_WASM, CATEGORY_JS)

PLACEHOLDER = "XXX"
PLACEHOLDER_REGEX = "[A-Za-z0-9_]+"

# Defined by stdweb; signature is `function __initialize( __wasm_module, __load_asynchronously )`.
ENTRY_POINT_MARKER = "__initialize"

# Screeps exposes the uploaded binary as a synchronous `require('compiled')`
# buffer, so the module is built inline and loaded non-asynchronously.
INITIALIZE_CALL = """
__initialize(new WebAssembly.Module(require('compiled')), false);
"""

EXPECTED_PREFIX = """"use strict";

if( typeof Rust === "undefined" ) {
    var Rust = {};
}

(function( root, factory ) {
    if( typeof define === "function" && define.amd ) {
        define( [], factory );
    } else if( typeof module === "object" && module.exports ) {
        module.exports = factory();
    } else {
        Rust.XXX = factory();
    }
}( this, function() {
    """

EXPECTED_SUFFIX = """


    if( typeof window === "undefined" ) {
        const fs = require( "fs" );
        const path = require( "path" );
        const wasm_path = path.join( __dirname, "XXX.wasm" );
        const buffer = fs.readFileSync( wasm_path );
        const mod = new WebAssembly.Module( buffer );

        return __initialize( mod, false );
    } else {
        return fetch( "XXX.wasm" )
            .then( response => response.arrayBuffer() )
            .then( bytes => WebAssembly.compile( bytes ) )
            .then( mod => __initialize( mod, true ) );
    }
}));
"""


@dataclass(frozen=True)
class BuildOptions:
	root: Path = Path(".")
	cargo: str = "cargo"

	@property
	def build_dir(self) -> Path:
		return self.root / BUILD_OUTPUT_DIR

	@property
	def out_dir(self) -> Path:
		return self.root / OUTPUT_DIR

	@property
	def wasm_output(self) -> Path:
		return self.out_dir / OUTPUT_WASM_NAME

	@property
	def js_output(self) -> Path:
		return self.out_dir / OUTPUT_JS_NAME
