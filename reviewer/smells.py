from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from .config import ReviewerSettings, get_settings
from .model import Dialect, Issue, Severity, Snippet
from . import scan


logger = logging.getLogger(__name__)

STRING_LITERAL_RE = re.compile(r'"(.*?)"')
NUMBER_LITERAL_RE = re.compile(r"\b\d+(?:\.\d+)?\b")

PARAMETER_SUGGESTIONS: Dict[Dialect, str] = {
	Dialect.CSHARP: "Consider grouping parameters into an object or reducing parameters.",
	Dialect.VBNET: "Consider grouping parameters into a type or reducing parameters.",
	Dialect.SQL: "Refactor to reduce parameters or use table-valued parameters.",
}


def _nesting_bodies(lines: Sequence[str], dialect: Dialect) -> List[scan.Block]:
	if dialect is Dialect.CSHARP:
		return scan.csharp_methods(lines)
	if dialect is Dialect.VBNET:
		return scan.vb_methods(lines)
	if dialect is Dialect.SQL:
		procedures = scan.sql_procedures(lines)
		if procedures:
			return procedures
		# A plain script is one body.
		return [scan.Block(name="", start=0, end=len(lines) - 1, closed=False, max_depth=scan.sql_max_depth(lines))]
	return []


def deep_nesting(snippet: Snippet, dialect: Dialect, settings: ReviewerSettings) -> List[Issue]:
	issues: List[Issue] = []
	limit = settings.max_nesting_depth
	for body in _nesting_bodies(snippet.lines, dialect):
		if body.max_depth <= limit:
			continue
		if dialect is Dialect.SQL:
			where = f" in procedure '{body.name}'" if body.name else ""
			message = f"Nested BEGIN/END blocks exceed {limit} levels{where}."
			suggestion = "Refactor into smaller procedures or reduce nesting."
		else:
			message = f"Nested blocks exceed {limit} levels in function '{body.name}'."
			suggestion = "Refactor using early returns or helper methods."
		issues.append(
			Issue(
				kind="Smell.DeepNesting",
				line_number=body.line_number,
				message=message,
				suggestion=suggestion,
				severity=Severity.WARNING,
			)
		)
	return issues


def long_parameter_lists(snippet: Snippet, dialect: Dialect, settings: ReviewerSettings) -> List[Issue]:
	finders = {
		Dialect.CSHARP: scan.csharp_signatures,
		Dialect.VBNET: scan.vb_signatures,
		Dialect.SQL: scan.sql_signatures,
	}
	find = finders.get(dialect)
	if find is None:
		return []
	label = "Procedure" if dialect is Dialect.SQL else "Method"
	issues: List[Issue] = []
	for idx, line in enumerate(snippet.lines):
		for sig in find(line):
			# Only signatures whose parameter list closes on the same line are measured.
			if sig.params is None:
				continue
			count = scan.count_parameters(sig.params)
			if count > settings.max_parameters:
				issues.append(
					Issue(
						kind="Smell.LongParameterList",
						line_number=idx + 1,
						message=f"{label} '{sig.name}' has {count} parameters.",
						suggestion=PARAMETER_SUGGESTIONS[dialect],
						severity=Severity.WARNING,
					)
				)
	return issues


def large_structures(snippet: Snippet, dialect: Dialect, settings: ReviewerSettings) -> List[Issue]:
	lines = snippet.lines
	issues: List[Issue] = []
	if dialect in (Dialect.CSHARP, Dialect.VBNET):
		classes = scan.csharp_classes(lines) if dialect is Dialect.CSHARP else scan.vb_classes(lines)
		for cls in classes:
			if cls.span > settings.max_structure_span or cls.methods > settings.max_methods:
				issues.append(
					Issue(
						kind="Smell.LargeClass",
						line_number=cls.line_number,
						message=f"Class '{cls.name}' spans {cls.span} lines and has {cls.methods} methods.",
						suggestion="Split into smaller classes or reduce responsibilities.",
						severity=Severity.INFO,
					)
				)
	elif dialect is Dialect.SQL:
		for proc in scan.sql_procedures(lines):
			if proc.span > settings.max_structure_span:
				issues.append(
					Issue(
						kind="Smell.LargeProcedure",
						line_number=proc.line_number,
						message=f"Procedure/Function '{proc.name}' spans {proc.span} lines.",
						suggestion="Break into smaller procedures or review logic size.",
						severity=Severity.INFO,
					)
				)
	return issues


def repeated_literals(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	"""Report literals found on too many distinct lines, in order of first appearance."""
	# (kind, normalized) -> [display text, occurrence count, line numbers]
	seen: Dict[Tuple[str, str], List] = {}

	def record(kind: str, text: str, normalized: str, line_number: int) -> None:
		entry = seen.setdefault((kind, normalized), [text, 0, []])
		entry[1] += 1
		if line_number not in entry[2]:
			entry[2].append(line_number)

	for idx, line in enumerate(snippet.lines):
		for m in STRING_LITERAL_RE.finditer(line):
			value = m.group(1)
			if value:
				record("string", f'"{value}"', value.lower(), idx + 1)
		for m in NUMBER_LITERAL_RE.finditer(line):
			record("number", m.group(0), m.group(0), idx + 1)

	issues: List[Issue] = []
	for text, count, line_numbers in seen.values():
		if len(line_numbers) >= settings.literal_repeat_lines:
			issues.append(
				Issue(
					kind="Smell.RepeatedLiteral",
					line_number=line_numbers[0],
					message=f"Literal {text} appears {count} times across {len(line_numbers)} lines.",
					suggestion="Extract to a constant or parameter to improve maintainability.",
					severity=Severity.INFO,
				)
			)
	return issues


def detect_smells(snippet: Snippet, dialect: Dialect, settings: Optional[ReviewerSettings] = None) -> List[Issue]:
	if snippet.is_blank:
		return []
	settings = settings or get_settings()
	issues: List[Issue] = []
	issues.extend(deep_nesting(snippet, dialect, settings))
	issues.extend(long_parameter_lists(snippet, dialect, settings))
	issues.extend(large_structures(snippet, dialect, settings))
	issues.extend(repeated_literals(snippet, settings))
	logger.debug("%d smell issues for %s", len(issues), dialect.value)
	return issues
