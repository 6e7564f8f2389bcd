# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Cut stdweb's initialization logic out of the generated loader and rebuild a
loader for Screeps.

The generated file wraps `__initialize` in UMD and environment-detection
bootstrapping (node `fs` vs browser `fetch`). Screeps has neither: it exposes
the uploaded binary synchronously, so only the body between the known header
and footer is kept and a direct call is appended.
"""

from __future__ import annotations

import logging

from screeps_build.config import ENTRY_POINT_MARKER, INITIALIZE_CALL
from screeps_build.errors import MissingEntryPointError, UnexpectedStructureError
from screeps_build.template import MatchSpan, match_loader

_log = logging.getLogger(__name__)


def extract_payload(subject: str, prefix: MatchSpan, suffix: MatchSpan, file_name: str) -> str:
	if prefix.end > suffix.start:
		raise UnexpectedStructureError(
			message=(
				f"'cargo web' generated unexpected JS: header and footer overlap in {file_name} "
				f"(header ends at {prefix.end}, footer starts at {suffix.start})"
			),
			path=file_name,
		)
	payload = subject[prefix.end:suffix.start]
	if ENTRY_POINT_MARKER not in payload:
		raise MissingEntryPointError(
			message=(
				f"'cargo web' generated unexpected JS output! It does not include a "
				f"'{ENTRY_POINT_MARKER}' function."
			),
			path=file_name,
		)
	return payload


def assemble_loader(payload: str) -> str:
	return f"{payload}\n{INITIALIZE_CALL}"


def process_loader(file_name: str, subject: str) -> str:
	"""Validate generated loader text and return the Screeps `main.js` contents."""
	_log.debug("processing %s", file_name)
	prefix, suffix = match_loader(file_name, subject)
	return assemble_loader(extract_payload(subject, prefix, suffix, file_name))
