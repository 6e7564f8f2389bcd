# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tolerant structural matching of generated loader text.

A template is fixed text in which:
  - every whitespace run matches zero or more whitespace characters, so
    reformatting between toolchain releases is tolerated;
  - the placeholder sentinel matches one or more identifier characters (crate
    names, file stems);
  - every other character must match exactly.

Two anchored patterns are built from the templates in `screeps_build.config`:
the prefix must start at offset 0 and the suffix must end at end of text. A
miss on either is a fail-closed `UnexpectedStructureError`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from screeps_build.config import EXPECTED_PREFIX, EXPECTED_SUFFIX, PLACEHOLDER, PLACEHOLDER_REGEX
from screeps_build.errors import UnexpectedStructureError

_log = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"(\s+)")


class SegmentKind(Enum):
	LITERAL = "literal"
	WHITESPACE = "whitespace"
	PLACEHOLDER = "placeholder"


class Anchor(Enum):
	START = "start"
	END = "end"


@dataclass(frozen=True)
class Segment:
	kind: SegmentKind
	text: str

	def to_regex(self) -> str:
		if self.kind is SegmentKind.WHITESPACE:
			return r"\s*"
		if self.kind is SegmentKind.PLACEHOLDER:
			return PLACEHOLDER_REGEX
		return re.escape(self.text)


@dataclass(frozen=True)
class Template:
	segments: tuple[Segment, ...]

	def to_regex(self) -> str:
		return "".join(seg.to_regex() for seg in self.segments)


@dataclass(frozen=True)
class MatchSpan:
	start: int
	end: int


@dataclass(frozen=True)
class TemplatePattern:
	anchor: Anchor
	regex: re.Pattern[str]

	def match(self, subject: str) -> MatchSpan | None:
		if self.anchor is Anchor.START:
			m = self.regex.match(subject)
		else:
			# Leftmost start wins, so a whitespace run in front of the suffix
			# belongs to the suffix rather than to the payload.
			m = self.regex.search(subject)
		if m is None:
			return None
		return MatchSpan(start=m.start(), end=m.end())


def parse_template(text: str, placeholder: str = PLACEHOLDER) -> Template:
	segments: list[Segment] = []
	for run in _WHITESPACE_RUN.split(text):
		if not run:
			continue
		if run.isspace():
			segments.append(Segment(SegmentKind.WHITESPACE, run))
			continue
		pieces = run.split(placeholder)
		for idx, piece in enumerate(pieces):
			if idx > 0:
				segments.append(Segment(SegmentKind.PLACEHOLDER, placeholder))
			if piece:
				segments.append(Segment(SegmentKind.LITERAL, piece))
	return Template(segments=tuple(segments))


def compile_template(text: str, anchor: Anchor) -> TemplatePattern:
	body = parse_template(text).to_regex()
	source = rf"\A(?:{body})" if anchor is Anchor.START else rf"(?:{body})\Z"
	return TemplatePattern(anchor=anchor, regex=re.compile(source))


def prefix_pattern() -> TemplatePattern:
	pattern = compile_template(EXPECTED_PREFIX, Anchor.START)
	_log.debug("expected prefix:\n```%s```", pattern.regex.pattern)
	return pattern


def suffix_pattern() -> TemplatePattern:
	pattern = compile_template(EXPECTED_SUFFIX, Anchor.END)
	_log.debug("expected suffix:\n```%s```", pattern.regex.pattern)
	return pattern


def match_loader(file_name: str, subject: str) -> tuple[MatchSpan, MatchSpan]:
	"""
	Locate the known stdweb header and footer in generated loader text.

	Returns `(prefix_span, suffix_span)`; ordering between the two is checked
	by the extractor, not here.
	"""
	prefix = prefix_pattern().match(subject)
	suffix = suffix_pattern().match(subject)
	if prefix is None or suffix is None:
		which = "prefix" if prefix is None else "suffix"
		raise UnexpectedStructureError(
			message=(
				f"'cargo web' generated unexpected JS {which}! This means it has been updated "
				"without screeps-build being updated to match. The wrapper templates need "
				f"updating; please report this and include the first ~30 lines of {file_name}"
			),
			path=file_name,
		)
	return prefix, suffix
