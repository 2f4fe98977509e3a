from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import FrozenSet, Iterator, List, Optional

from .model import Dialect, Issue, Severity, Snippet
from . import scan


logger = logging.getLogger(__name__)

GENERIC_NAMES: FrozenSet[str] = frozenset({"abc", "tmp", "temp", "test", "func", "data", "value", "var"})
LOOP_COUNTERS: FrozenSet[str] = frozenset({"i", "j"})

# Whole words or camelCase humps: principalAmount, annualRate, loan_term; not generate or determine.
LOAN_TERMS_RE = re.compile(r"(?:(?<![A-Za-z])(?i:principal|rate|term)|(?<=[a-z0-9])(?:Principal|Rate|Term))(?![a-z])")

SQL_ALIAS_RE = re.compile(rf"\b(?:FROM|JOIN)\s+[^\s]+\s+(?:AS\s+)?({scan.IDENT})", re.IGNORECASE)
# Bracketed aliases may hold any characters, including a leading digit.
SQL_COLUMN_ALIAS_RE = re.compile(rf"\bAS\s+(?:\[([^\]]+)\]|({scan.IDENT}))", re.IGNORECASE)
# Words that may follow a table name but are never aliases.
SQL_RESERVED = frozenset({
	"where", "join", "inner", "left", "right", "full", "outer", "cross", "on", "group", "order",
	"having", "union", "with", "set", "values", "select", "as", "begin", "end", "go", "into",
	"limit", "offset", "for", "option", "pivot", "unpivot", "apply", "except", "intersect",
})

BASE_SUGGESTION = "Use a meaningful verb/noun, e.g., 'CalculateLoanInterest' or 'ProcessData'."


@dataclass(frozen=True)
class Identifier:
	name: str
	line_number: int
	is_function: bool
	loop_counter: bool = False


def has_loan_terms(text: str) -> bool:
	return bool(LOAN_TERMS_RE.search(text))


def sql_verb_hint(text: str) -> Optional[str]:
	if re.search(r"\bINSERT\b", text, re.IGNORECASE):
		return "InsertRecord"
	if re.search(r"\bUPDATE\b", text, re.IGNORECASE):
		return "UpdateRecord"
	return None


def suggest(dialect: Dialect, text: str) -> str:
	if dialect is Dialect.SQL:
		verb = sql_verb_hint(text)
		if verb:
			return f"{BASE_SUGGESTION} For SQL, consider '{verb}'."
	elif dialect in (Dialect.CSHARP, Dialect.VBNET) and has_loan_terms(text):
		return f"{BASE_SUGGESTION} Given parameters like principal/rate/term, consider 'CalculateLoanInterest'."
	return BASE_SUGGESTION


def _csharp_identifiers(snippet: Snippet) -> Iterator[Identifier]:
	counters = scan.csharp_loop_counters(snippet.lines)
	for idx, line in enumerate(snippet.lines):
		for sig in scan.csharp_signatures(line):
			yield Identifier(sig.name, idx + 1, is_function=True)
		for name in scan.csharp_variables(line):
			yield Identifier(name, idx + 1, is_function=False, loop_counter=name.lower() in counters)


def _vb_identifiers(snippet: Snippet) -> Iterator[Identifier]:
	counters = scan.vb_loop_counters(snippet.lines)
	for idx, line in enumerate(snippet.lines):
		for sig in scan.vb_signatures(line):
			yield Identifier(sig.name, idx + 1, is_function=True)
		for m in scan.VB_DIM_RE.finditer(line):
			name = m.group(1)
			yield Identifier(name, idx + 1, is_function=False, loop_counter=name.lower() in counters)


def _sql_identifiers(snippet: Snippet) -> Iterator[Identifier]:
	for idx, line in enumerate(snippet.lines):
		# A table alias written "FROM t AS x" is reported once, via the AS pattern.
		for m in SQL_ALIAS_RE.finditer(line):
			alias = m.group(1)
			if alias.lower() not in SQL_RESERVED and not re.search(r"\bAS\s*$", line[:m.start(1)], re.IGNORECASE):
				yield Identifier(alias, idx + 1, is_function=False)
		for m in SQL_COLUMN_ALIAS_RE.finditer(line):
			alias = m.group(1) or m.group(2)
			if alias.lower() not in SQL_RESERVED:
				yield Identifier(alias, idx + 1, is_function=False)
		for sig in scan.sql_signatures(line):
			yield Identifier(sig.name, idx + 1, is_function=True)


EXTRACTORS = {
	Dialect.CSHARP: _csharp_identifiers,
	Dialect.VBNET: _vb_identifiers,
	Dialect.SQL: _sql_identifiers,
}


def evaluate_name(ident: Identifier, suggestion: str) -> List[Issue]:
	"""Score one identifier. A leading digit stops further checks."""

	def issue(message: str) -> Issue:
		return Issue(
			kind="Naming.NonDescriptive",
			line_number=ident.line_number,
			message=message,
			suggestion=suggestion,
			severity=Severity.INFO,
		)

	name = ident.name
	if name[:1].isdigit():
		return [issue(f"Name '{name}' starts with a number.")]

	issues: List[Issue] = []
	if ident.is_function and len(name) < 3:
		issues.append(issue(f"Function/method name '{name}' is too short."))
	exempt = ident.loop_counter and name.lower() in LOOP_COUNTERS
	if not ident.is_function and len(name) < 2 and not exempt:
		issues.append(issue(f"Variable name '{name}' is too short."))
	if name.lower() in GENERIC_NAMES:
		issues.append(issue(f"Name '{name}' is generic and non-descriptive."))
	return issues


def check_names(snippet: Snippet, dialect: Dialect) -> List[Issue]:
	extract = EXTRACTORS.get(dialect)
	if extract is None or snippet.is_blank:
		return []
	suggestion = suggest(dialect, snippet.text)
	issues: List[Issue] = []
	for ident in extract(snippet):
		issues.extend(evaluate_name(ident, suggestion))
	logger.debug("%d naming issues for %s", len(issues), dialect.value)
	return issues
