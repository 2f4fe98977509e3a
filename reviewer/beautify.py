from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Sequence

from .model import Dialect, Snippet


INDENT = "    "

CSHARP_KEYWORDS = (
	"using", "namespace", "public", "private", "protected", "internal", "class", "struct",
	"record", "void", "static", "async", "return", "if", "else", "for", "foreach", "while",
	"switch", "case", "break", "continue", "try", "catch", "finally",
)
VB_KEYWORDS = (
	"Public", "Private", "Protected", "Friend", "Shared", "Static", "Module", "Class", "Sub",
	"Function", "End", "If", "Then", "Else", "Dim", "As", "Return",
)
SQL_KEYWORDS = (
	"SELECT", "INSERT", "UPDATE", "DELETE", "CREATE", "ALTER", "DROP", "FROM", "WHERE", "JOIN",
	"LEFT", "RIGHT", "FULL", "INNER", "OUTER", "ON", "GROUP", "BY", "ORDER", "HAVING", "INTO",
	"VALUES", "SET", "AND", "OR", "NOT", "BEGIN", "END", "AS", "WITH", "TOP", "DISTINCT",
)

VB_DEDENT_RE = re.compile(r"^End\b", re.IGNORECASE)
VB_INDENT_RE = re.compile(r"\b(?:Class|Module|Sub|Function)\s+[A-Za-z_]", re.IGNORECASE)
VB_IF_BLOCK_RE = re.compile(r"^If\b.*\bThen$", re.IGNORECASE)
SQL_DEDENT_RE = re.compile(r"^END\b", re.IGNORECASE)
SQL_INDENT_RE = re.compile(r"\bBEGIN\b", re.IGNORECASE)


def normalize_keywords(line: str, keywords: Sequence[str]) -> str:
	for keyword in keywords:
		line = re.sub(rf"\b{re.escape(keyword)}\b", keyword, line, flags=re.IGNORECASE)
	return line


def _beautify_csharp(lines: Sequence[str]) -> List[str]:
	out: List[str] = []
	depth = 0
	for raw in lines:
		line = raw.strip()
		if not line:
			out.append("")
			continue
		leading = len(line) - len(line.lstrip("}"))
		depth = max(0, depth - leading)
		line = normalize_keywords(line, CSHARP_KEYWORDS)
		out.append(INDENT * depth + line)
		# Leading closers were already applied above.
		depth = max(0, depth + line.count("{") - (line.count("}") - leading))
	return out


def _beautify_vb(lines: Sequence[str]) -> List[str]:
	out: List[str] = []
	depth = 0
	for raw in lines:
		line = raw.strip()
		if not line:
			out.append("")
			continue
		if VB_DEDENT_RE.match(line):
			depth = max(0, depth - 1)
		line = normalize_keywords(line, VB_KEYWORDS)
		out.append(INDENT * depth + line)
		if not VB_DEDENT_RE.match(line) and (VB_INDENT_RE.search(line) or VB_IF_BLOCK_RE.match(line)):
			depth += 1
	return out


def _beautify_sql(lines: Sequence[str]) -> List[str]:
	out: List[str] = []
	depth = 0
	for raw in lines:
		line = raw.strip()
		if not line:
			out.append("")
			continue
		if SQL_DEDENT_RE.match(line):
			depth = max(0, depth - 1)
		line = normalize_keywords(line, SQL_KEYWORDS)
		out.append(INDENT * depth + line)
		if SQL_INDENT_RE.search(line):
			depth += 1
	return out


FORMATTERS: Dict[Dialect, Callable[[Sequence[str]], List[str]]] = {
	Dialect.VBNET: _beautify_vb,
	Dialect.SQL: _beautify_sql,
}


def beautify(text: Optional[str], dialect: Dialect) -> str:
	"""Re-indent a snippet and normalize keyword casing. Purely cosmetic."""
	snippet = Snippet.from_text(text)
	if snippet.is_blank:
		return ""
	formatter = FORMATTERS.get(dialect, _beautify_csharp)
	return "\n".join(formatter(snippet.lines))
