# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import random

import pytest

from screeps_build.config import EXPECTED_PREFIX, EXPECTED_SUFFIX
from screeps_build.errors import UnexpectedStructureError
from screeps_build.template import (
	Anchor,
	MatchSpan,
	Segment,
	SegmentKind,
	compile_template,
	match_loader,
	parse_template,
	prefix_pattern,
	suffix_pattern,
)
from screeps_build.tests.loader_helpers import INIT_PAYLOAD, generated_js, render_template

_PAYLOADS = (
	INIT_PAYLOAD,
	"function __initialize( __wasm_module, __load_asynchronously ) {\n        return Module;\n    }",
	'var Module = {};\n    Module.STDWEB_PRIVATE = {};\n    function __initialize(m, a) { return "XXX.wasm"; }',
)


def test_parse_template_partitions_runs() -> None:
	tpl = parse_template('Rust.XXX = factory();\n    }')
	assert tpl.segments == (
		Segment(SegmentKind.LITERAL, "Rust."),
		Segment(SegmentKind.PLACEHOLDER, "XXX"),
		Segment(SegmentKind.WHITESPACE, " "),
		Segment(SegmentKind.LITERAL, "="),
		Segment(SegmentKind.WHITESPACE, " "),
		Segment(SegmentKind.LITERAL, "factory();"),
		Segment(SegmentKind.WHITESPACE, "\n    "),
		Segment(SegmentKind.LITERAL, "}"),
	)


def test_compiled_literals_are_escaped() -> None:
	pat = compile_template("a.b( XXX )", Anchor.START)
	assert pat.match("a.b(foo)") == MatchSpan(0, 8)
	assert pat.match("a.b(\n\tfoo_1\n)") == MatchSpan(0, 13)
	assert pat.match("axb(foo)") is None
	# the placeholder needs at least one identifier character
	assert pat.match("a.b( )") is None
	assert pat.match("a.b(foo-bar)") is None


def test_anchors_are_exclusive() -> None:
	start = compile_template("x()", Anchor.START)
	end = compile_template("x()", Anchor.END)
	assert start.match("  x()") is None
	assert start.match("x() tail") == MatchSpan(0, 3)
	assert end.match("x() tail") is None
	assert end.match("head x()") == MatchSpan(5, 8)


def test_verbatim_stdweb_output_matches() -> None:
	text = generated_js()
	prefix, suffix = match_loader("out.js", text)
	assert prefix.start == 0
	assert suffix.end == len(text)
	assert text[prefix.end:suffix.start] == INIT_PAYLOAD


@pytest.mark.parametrize("seed", range(40))
def test_reformatted_output_matches_and_yields_exact_payload(seed: int) -> None:
	rng = random.Random(seed)
	prefix_text, _ = render_template(EXPECTED_PREFIX, rng)
	suffix_text, _ = render_template(EXPECTED_SUFFIX, rng)
	payload = rng.choice(_PAYLOADS)
	text = prefix_text + payload + suffix_text

	prefix, suffix = match_loader("out.js", text)
	assert prefix == MatchSpan(0, len(prefix_text))
	assert suffix == MatchSpan(len(prefix_text) + len(payload), len(text))
	assert text[prefix.end:suffix.start] == payload


def test_altered_prefix_literal_is_rejected() -> None:
	prefix_text, offsets = render_template(EXPECTED_PREFIX)
	suffix_text, _ = render_template(EXPECTED_SUFFIX)
	pattern = prefix_pattern()
	for off in offsets:
		broken = prefix_text[:off] + "@" + prefix_text[off + 1:]
		assert pattern.match(broken + INIT_PAYLOAD + suffix_text) is None, repr(prefix_text[off])


def test_altered_suffix_literal_is_rejected() -> None:
	prefix_text, _ = render_template(EXPECTED_PREFIX)
	suffix_text, offsets = render_template(EXPECTED_SUFFIX)
	pattern = suffix_pattern()
	for off in offsets:
		broken = suffix_text[:off] + "@" + suffix_text[off + 1:]
		assert pattern.match(prefix_text + INIT_PAYLOAD + broken) is None, repr(suffix_text[off])


def test_changed_fetch_branch_names_file_and_asks_for_update() -> None:
	text = generated_js().replace('return fetch( "my_bot.wasm" )', 'return load( "my_bot.wasm" )')
	with pytest.raises(UnexpectedStructureError) as exc:
		match_loader("target/out.js", text)
	assert exc.value.path == "target/out.js"
	assert "suffix" in exc.value.message
	assert "target/out.js" in str(exc.value)
	assert "updat" in exc.value.message


def test_changed_header_is_rejected() -> None:
	text = generated_js().replace('"use strict";', '"use asm";', 1)
	with pytest.raises(UnexpectedStructureError, match="prefix"):
		match_loader("out.js", text)


def test_payload_edge_whitespace_goes_to_header_and_footer() -> None:
	text = generated_js(payload="\n  function __initialize(){}\n")
	prefix, suffix = match_loader("out.js", text)
	assert text[prefix.end:suffix.start] == "function __initialize(){}"
