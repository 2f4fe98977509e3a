from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import ReviewerSettings, get_settings
from .detect import dialect_from_name
from .model import Dialect, Issue, Severity, Snippet
from . import scan


logger = logging.getLogger(__name__)

Rule = Callable[[Snippet, ReviewerSettings], List[Issue]]

SQL_SELECT_STAR = "SELECT *"
SQL_MUTATION_RE = re.compile(r"\b(?:DELETE|UPDATE)\b", re.IGNORECASE)
SQL_WHERE_RE = re.compile(r"\bWHERE\b", re.IGNORECASE)


def _lines_containing(lines: Sequence[str], needle: str) -> List[int]:
	needle = needle.lower()
	return [idx for idx, line in enumerate(lines) if needle in line.lower()]


# ---------------------------------------------------------------------------
# CSharp
# ---------------------------------------------------------------------------

def csharp_long_lines(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	limit = settings.max_line_length
	return [
		Issue(
			kind="CSharp.LongLine",
			line_number=idx + 1,
			message=f"Line exceeds {limit} characters ({len(line)}).",
			suggestion="Wrap or refactor to reduce line length.",
			severity=Severity.WARNING,
		)
		for idx, line in enumerate(snippet.lines)
		if len(line) > limit
	]


def csharp_todos(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	return [
		Issue(
			kind="CSharp.TODO",
			line_number=idx + 1,
			message="TODO comment found.",
			suggestion="Resolve or track the TODO with an issue.",
			severity=Severity.INFO,
		)
		for idx in _lines_containing(snippet.lines, "TODO")
	]


def csharp_nested_ifs(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	"""Flag methods whose body holds more 'if' tokens than allowed.

	Reported on the line where the method's braces balance out; a method
	that never closes is not reported.
	"""
	issues: List[Issue] = []
	lines = snippet.lines
	for method in scan.csharp_methods(lines):
		if not method.closed:
			continue
		count = sum(scan.count_word(line, "if") for line in lines[method.start:method.end + 1])
		if count > settings.max_if_count:
			issues.append(
				Issue(
					kind="CSharp.NestedIfs",
					line_number=method.end_line_number,
					message=f"Method '{method.name}' contains more than {settings.max_if_count} 'if' statements (found {count}).",
					suggestion="Consider refactoring (guard clauses, strategy, or early returns).",
					severity=Severity.WARNING,
				)
			)
	return issues


# ---------------------------------------------------------------------------
# VBNet
# ---------------------------------------------------------------------------

def vb_goto(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	return [
		Issue(
			kind="VBNet.GoTo",
			line_number=idx + 1,
			message="Usage of 'GoTo' found.",
			suggestion="Avoid GoTo; use structured control flow (If/Else, Select Case, loops).",
			severity=Severity.WARNING,
		)
		for idx, line in enumerate(snippet.lines)
		if scan.VB_GOTO_RE.search(line)
	]


def vb_unmatched_blocks(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	"""Compare Sub/Function declarations against their End statements, file-wide."""
	openers = {"sub": 0, "function": 0}
	closers = {"sub": 0, "function": 0}
	bodiless = scan.vb_bodiless_lines(snippet.lines)
	for idx, line in enumerate(snippet.lines):
		if idx not in bodiless:
			for m in scan.VB_METHOD_RE.finditer(line):
				openers[m.group(1).lower()] += 1
		for m in scan.VB_METHOD_END_RE.finditer(line):
			closers[m.group(1).lower()] += 1

	issues: List[Issue] = []
	if openers["sub"] > closers["sub"]:
		issues.append(
			Issue(
				kind="VBNet.MissingEndSub",
				message="Detected 'Sub' without matching 'End Sub'.",
				suggestion="Ensure each Sub is closed with 'End Sub'.",
				severity=Severity.ERROR,
			)
		)
	if openers["function"] > closers["function"]:
		issues.append(
			Issue(
				kind="VBNet.MissingEndFunction",
				message="Detected 'Function' without matching 'End Function'.",
				suggestion="Ensure each Function is closed with 'End Function'.",
				severity=Severity.ERROR,
			)
		)
	return issues


# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

def sql_select_star(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	return [
		Issue(
			kind="SQL.SelectStar",
			line_number=idx + 1,
			message="Usage of SELECT * detected.",
			suggestion="Specify explicit column names to improve performance and stability.",
			severity=Severity.WARNING,
		)
		for idx in _lines_containing(snippet.lines, SQL_SELECT_STAR)
	]


def sql_missing_where(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	return [
		Issue(
			kind="SQL.MissingWhere",
			line_number=idx + 1,
			message="DELETE/UPDATE without WHERE clause.",
			suggestion="Add a WHERE clause to avoid affecting unintended rows.",
			severity=Severity.ERROR,
		)
		for idx, line in enumerate(snippet.lines)
		if SQL_MUTATION_RE.search(line) and not SQL_WHERE_RE.search(line)
	]


def sql_nolock(snippet: Snippet, settings: ReviewerSettings) -> List[Issue]:
	return [
		Issue(
			kind="SQL.NoLock",
			line_number=idx + 1,
			message="WITH (NOLOCK) hint detected.",
			suggestion="Be aware NOLOCK can read uncommitted data; consider SNAPSHOT isolation or proper indexing.",
			severity=Severity.INFO,
		)
		for idx in _lines_containing(snippet.lines, "NOLOCK")
	]


RULES: Dict[Dialect, Tuple[Rule, ...]] = {
	Dialect.CSHARP: (csharp_long_lines, csharp_todos, csharp_nested_ifs),
	Dialect.VBNET: (vb_goto, vb_unmatched_blocks),
	Dialect.SQL: (sql_select_star, sql_missing_where, sql_nolock),
}


def run_rules(snippet: Snippet, dialect: Dialect, settings: Optional[ReviewerSettings] = None) -> List[Issue]:
	settings = settings or get_settings()
	issues: List[Issue] = []
	for rule in RULES.get(dialect, ()):
		issues.extend(rule(snippet, settings))
	logger.debug("%d rule issues for %s", len(issues), dialect.value)
	return issues


def analyze_rules(text: Optional[str], language_name: Optional[str]) -> List[Issue]:
	"""Run only the fixed per-dialect rules for a dialect given by display name."""
	return run_rules(Snippet.from_text(text), dialect_from_name(language_name))
