from __future__ import annotations

import re
from typing import Optional, Sequence, Tuple

from .config import ReviewerSettings, get_settings
from .model import Dialect, Snippet
from . import scan
from .naming import has_loan_terms


DEFAULT_SUMMARY = "Analyzes generic code snippet."
LOAN_SUMMARY = "Calculates loan interest."
GENERIC_SUMMARY = "Processes application logic."

# Checked in order against the lowercased method or class name.
VERB_SUMMARIES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
	(("save", "insert"), "Saves data to the database."),
	(("delete", "remove"), "Deletes records."),
	(("get",), "Retrieves application data."),
	(("update",), "Updates application data."),
	(("calculate",), "Performs a calculation."),
	(("process",), "Processes application logic."),
	(("validate",), "Validates input or state."),
)

SQL_CREATE_ROUTINE_RE = re.compile(r"\bCREATE\s+(?:OR\s+ALTER\s+)?(?:PROC|PROCEDURE|FUNCTION)\b", re.IGNORECASE)


def first_declared_name(lines: Sequence[str], dialect: Dialect) -> Optional[str]:
	"""Name of the first method in the snippet, else of the first class."""
	find = scan.vb_signatures if dialect is Dialect.VBNET else scan.csharp_signatures
	for line in lines:
		signatures = find(line)
		if signatures:
			return signatures[0].name
	class_re = scan.VB_CLASS_RE if dialect is Dialect.VBNET else scan.CSHARP_CLASS_RE
	for line in lines:
		m = class_re.search(line)
		if m:
			return m.group(1)
	return None


def summarize_dotnet(snippet: Snippet, dialect: Dialect) -> str:
	if has_loan_terms(snippet.text):
		return LOAN_SUMMARY
	name = first_declared_name(snippet.lines, dialect)
	if name:
		lowered = name.lower()
		for verbs, sentence in VERB_SUMMARIES:
			if any(verb in lowered for verb in verbs):
				return sentence
	return GENERIC_SUMMARY


def extract_sql_table(text: str, keyword: str) -> str:
	m = re.search(rf"\b{keyword}\s+([A-Za-z0-9_.\[\]]+)", text, re.IGNORECASE)
	return m.group(1) if m else "table"


def summarize_sql(snippet: Snippet) -> str:
	text = snippet.text
	if scan.count_word(text, "SELECT"):
		return f"Retrieves data from {extract_sql_table(text, 'FROM')}."
	if scan.count_word(text, "INSERT"):
		return f"Inserts new records into {extract_sql_table(text, 'INTO')}."
	if scan.count_word(text, "UPDATE"):
		return f"Updates records in {extract_sql_table(text, 'UPDATE')}."
	if scan.count_word(text, "DELETE"):
		return f"Deletes records from {extract_sql_table(text, 'FROM')}."
	if SQL_CREATE_ROUTINE_RE.search(text):
		signatures = [sig for line in snippet.lines for sig in scan.sql_signatures(line)]
		if signatures:
			return f"Defines stored procedure/function {signatures[0].name}."
		return "Defines stored procedure/function."
	return "Executes SQL command."


def finalize(summary: str, max_length: int = 120) -> str:
	"""Trim, terminate with a period, capitalize, and cap the length."""
	summary = (summary or "").strip() or DEFAULT_SUMMARY
	if not summary.endswith("."):
		summary += "."
	summary = summary[0].upper() + summary[1:]
	if len(summary) > max_length:
		summary = summary[:max_length - 1].rstrip(" .") + "."
	return summary


def summarize(snippet: Snippet, dialect: Dialect, settings: Optional[ReviewerSettings] = None) -> str:
	settings = settings or get_settings()
	if snippet.is_blank:
		return DEFAULT_SUMMARY
	if dialect is Dialect.SQL:
		summary = summarize_sql(snippet)
	else:
		summary = summarize_dotnet(snippet, dialect)
	return finalize(summary, settings.max_summary_length)
