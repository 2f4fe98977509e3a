"""Line-level structure heuristics shared by the rule and smell passes.

Nothing here builds a parse tree. Each helper walks a sequence of lines
once, counting braces (CSharp), block keywords (VBNet) or BEGIN/END
tokens (SQL), and reports where a method, class or procedure starts and
where its depth returns to zero. Braces or keywords inside string and
comment literals are counted like any other.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple


IDENT = r"[A-Za-z_][A-Za-z0-9_]*"

CSHARP_MODIFIERS = r"public|private|protected|internal|static|async|virtual|override|sealed|partial|extern|abstract|unsafe|new"
CSHARP_TYPE = r"[A-Za-z_][A-Za-z0-9_<>\[\]?.]*"

# returnType Name( [params) ]
CSHARP_SIGNATURE_RE = re.compile(
	rf"\b(?:(?:{CSHARP_MODIFIERS})\s+)*({CSHARP_TYPE})\s+({IDENT})\s*\((?:([^)]*)\))?",
	re.IGNORECASE,
)
# Type name = ... | Type name; | Type name,
CSHARP_VARIABLE_RE = re.compile(rf"\b({CSHARP_TYPE})\s+({IDENT})\s*(?:=(?!=)|;|,)", re.IGNORECASE)
CSHARP_CLASS_RE = re.compile(rf"\bclass\s+({IDENT})", re.IGNORECASE)
CSHARP_FOR_HEADER_RE = re.compile(r"\bfor\s*\(([^)]*)\)", re.IGNORECASE)
CSHARP_LOOP_COUNTER_RE = re.compile(rf"\b(?:var|{CSHARP_TYPE})\s+([ij])\b")

# Tokens that look like "Type Name(" or "Type name =" but are statements.
CSHARP_KEYWORDS = frozenset({
	"if", "else", "for", "foreach", "while", "do", "switch", "case", "catch", "using", "lock",
	"return", "new", "throw", "await", "yield", "nameof", "typeof", "sizeof", "default", "when",
	"in", "is", "as", "out", "ref", "goto", "fixed", "checked", "unchecked", "namespace",
	"class", "struct", "interface", "record", "enum", "where", "params", "operator", "this", "base",
})

VB_MODIFIERS = r"Public|Private|Protected|Friend|Shared|Static|Overrides|Overridable|Overloads|NotOverridable|MustOverride|Shadows|Partial|Async"

# [modifiers] Sub|Function Name [(params)]
VB_METHOD_RE = re.compile(
	rf"\b(?:(?:{VB_MODIFIERS})\s+)*(Sub|Function)\s+({IDENT})(?:\s*\(([^)]*)\))?",
	re.IGNORECASE,
)
VB_CLASS_RE = re.compile(rf"\bClass\s+({IDENT})", re.IGNORECASE)
VB_DIM_RE = re.compile(rf"\bDim\s+({IDENT})", re.IGNORECASE)
VB_FOR_RE = re.compile(rf"\bFor\s+({IDENT})\s*=", re.IGNORECASE)
VB_BLOCK_OPEN_RE = re.compile(
	rf"^\s*(?:(?:{VB_MODIFIERS})\s+)*(?:Class|Module|Sub|Function)\s+{IDENT}",
	re.IGNORECASE,
)
# Single-line "If x Then y" has no End If, so only a trailing Then opens a block.
VB_IF_BLOCK_RE = re.compile(r"^\s*If\b.*\bThen\s*(?:'.*)?$", re.IGNORECASE)
VB_BLOCK_CLOSE_RE = re.compile(r"^\s*End\s+(?:Class|Module|Sub|Function|If)\b", re.IGNORECASE)
VB_METHOD_END_RE = re.compile(r"\bEnd\s+(Sub|Function)\b", re.IGNORECASE)
VB_CLASS_END_RE = re.compile(r"\bEnd\s+Class\b", re.IGNORECASE)
VB_GOTO_RE = re.compile(r"\bGoTo\b", re.IGNORECASE)
# Declarations that never get an End Sub/End Function.
VB_BODILESS_RE = re.compile(r"\b(?:MustOverride|Declare)\b", re.IGNORECASE)
VB_INTERFACE_RE = re.compile(rf"^\s*(?:(?:{VB_MODIFIERS})\s+)*Interface\s+{IDENT}", re.IGNORECASE)
VB_INTERFACE_END_RE = re.compile(r"\bEnd\s+Interface\b", re.IGNORECASE)

SQL_PROCEDURE_RE = re.compile(
	rf"\bCREATE\s+(?:OR\s+ALTER\s+)?(?:PROC|PROCEDURE|FUNCTION)\s+((?:{IDENT}\.)*{IDENT})(?:\s*\(([^)]*)\))?",
	re.IGNORECASE,
)
SQL_INLINE_PARAMS_RE = re.compile(r"^\s*(@.*?)(?:\bAS\b.*)?$", re.IGNORECASE)
SQL_BEGIN_RE = re.compile(r"\bBEGIN\b(?!\s+(?:TRAN|TRANSACTION|DISTRIBUTED)\b)", re.IGNORECASE)
SQL_END_RE = re.compile(r"\bEND\b", re.IGNORECASE)
SQL_BATCH_SEPARATOR_RE = re.compile(r"^\s*GO\b", re.IGNORECASE)


@dataclass(frozen=True)
class Signature:
	name: str
	params: Optional[str]  # None when the parameter list does not close on the line


@dataclass(frozen=True)
class Block:
	"""A method, class or procedure located by depth balancing.

	``start`` and ``end`` are 0-based line indexes; ``end`` is the closing
	line when ``closed`` is set, otherwise the last line scanned.
	"""

	name: str
	start: int
	end: int
	closed: bool
	max_depth: int
	methods: int = 0

	@property
	def line_number(self) -> int:
		return self.start + 1

	@property
	def end_line_number(self) -> int:
		return self.end + 1

	@property
	def span(self) -> int:
		return self.end - self.start


def count_word(line: str, word: str) -> int:
	return len(re.findall(rf"\b{re.escape(word)}\b", line, re.IGNORECASE))


def count_parameters(params: Optional[str]) -> int:
	"""Count top-level comma separated parameters.

	Commas inside generic arguments or parentheses, such as DECIMAL(18,2), do not split.
	"""
	if params is None or not params.strip():
		return 0
	count = 1
	angle = 0
	paren = 0
	for ch in params:
		if ch == "<":
			angle += 1
		elif ch == ">":
			angle = max(0, angle - 1)
		elif ch == "(":
			paren += 1
		elif ch == ")":
			paren = max(0, paren - 1)
		elif ch == "," and angle == 0 and paren == 0:
			count += 1
	return count


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

def csharp_signatures(line: str) -> List[Signature]:
	found: List[Signature] = []
	for m in CSHARP_SIGNATURE_RE.finditer(line):
		return_type, name = m.group(1), m.group(2)
		if return_type.lower() in CSHARP_KEYWORDS or name.lower() in CSHARP_KEYWORDS:
			continue
		found.append(Signature(name=name, params=m.group(3)))
	return found


def csharp_variables(line: str) -> List[str]:
	names: List[str] = []
	for m in CSHARP_VARIABLE_RE.finditer(line):
		type_token, name = m.group(1), m.group(2)
		if type_token.lower() in CSHARP_KEYWORDS or name.lower() in CSHARP_KEYWORDS:
			continue
		names.append(name)
	return names


def vb_signatures(line: str) -> List[Signature]:
	return [Signature(name=m.group(2), params=m.group(3)) for m in VB_METHOD_RE.finditer(line)]


def vb_bodiless_lines(lines: Sequence[str]) -> frozenset:
	"""Indexes of Sub/Function declarations that have no body: MustOverride, Declare, interface members."""
	found = set()
	in_interface = False
	for idx, line in enumerate(lines):
		if VB_INTERFACE_RE.match(line):
			in_interface = True
		elif VB_INTERFACE_END_RE.search(line):
			in_interface = False
		elif VB_METHOD_RE.search(line) and (in_interface or VB_BODILESS_RE.search(line)):
			found.add(idx)
	return frozenset(found)


def sql_signatures(line: str) -> List[Signature]:
	found: List[Signature] = []
	for m in SQL_PROCEDURE_RE.finditer(line):
		params = m.group(2)
		if params is None:
			inline = SQL_INLINE_PARAMS_RE.match(line[m.end():])
			params = inline.group(1) if inline else None
		found.append(Signature(name=m.group(1).rsplit(".", 1)[-1], params=params))
	return found


def csharp_loop_counters(lines: Sequence[str]) -> frozenset:
	counters = set()
	for line in lines:
		header = CSHARP_FOR_HEADER_RE.search(line)
		if header:
			counter = CSHARP_LOOP_COUNTER_RE.search(header.group(1))
			if counter:
				counters.add(counter.group(1).lower())
	return frozenset(counters)


def vb_loop_counters(lines: Sequence[str]) -> frozenset:
	counters = set()
	for line in lines:
		m = VB_FOR_RE.search(line)
		if m and m.group(1).lower() in ("i", "j"):
			counters.add(m.group(1).lower())
	return frozenset(counters)


# ---------------------------------------------------------------------------
# Depth tracking
# ---------------------------------------------------------------------------

def brace_delta(line: str) -> Tuple[int, int]:
	"""Return (net depth change, highest depth reached within the line) relative to 0."""
	depth = 0
	peak = 0
	for ch in line:
		if ch == "{":
			depth += 1
			peak = max(peak, depth)
		elif ch == "}":
			depth -= 1
	return depth, peak


def vb_delta(line: str) -> int:
	if VB_BODILESS_RE.search(line):
		return 0
	if VB_BLOCK_CLOSE_RE.match(line):
		return -1
	if VB_BLOCK_OPEN_RE.match(line) or VB_IF_BLOCK_RE.match(line):
		return 1
	return 0


def sql_delta(line: str) -> Tuple[int, int]:
	"""Return (BEGIN count, END count) for a line."""
	return len(SQL_BEGIN_RE.findall(line)), len(SQL_END_RE.findall(line))


# ---------------------------------------------------------------------------
# Boundary detection
# ---------------------------------------------------------------------------

def brace_block_end(lines: Sequence[str], start: int) -> Tuple[int, bool, int]:
	"""Scan from ``start`` until brace depth returns to zero after going positive.

	A declaration ending in ``;`` before any brace opens has no body.
	"""
	depth = 0
	max_depth = 0
	opened = False
	for idx in range(start, len(lines)):
		line = lines[idx]
		net, peak = brace_delta(line)
		if peak:
			opened = True
			max_depth = max(max_depth, depth + peak)
		depth += net
		if opened and depth <= 0:
			return idx, True, max_depth
		if not opened and line.rstrip().endswith(";"):
			return idx, False, 0
	return len(lines) - 1, False, max_depth


def vb_block_end(lines: Sequence[str], start: int, end_re: re.Pattern) -> Tuple[int, bool, int]:
	depth = 0
	max_depth = 0
	for idx in range(start, len(lines)):
		depth += vb_delta(lines[idx])
		max_depth = max(max_depth, depth)
		if end_re.search(lines[idx]):
			return idx, True, max_depth
	return len(lines) - 1, False, max_depth


def sql_block_end(lines: Sequence[str], start: int) -> Tuple[int, bool, int]:
	"""Scan to the matching END, the next batch separator, or the end of input."""
	depth = 0
	max_depth = 0
	opened = False
	for idx in range(start, len(lines)):
		line = lines[idx]
		if idx > start and SQL_BATCH_SEPARATOR_RE.match(line):
			return idx - 1, True, max_depth
		begins, ends = sql_delta(line)
		depth += begins
		max_depth = max(max_depth, depth)
		if begins:
			opened = True
		depth -= ends
		if opened and depth <= 0:
			return idx, True, max_depth
	return len(lines) - 1, False, max_depth


def sql_max_depth(lines: Sequence[str]) -> int:
	depth = 0
	max_depth = 0
	for line in lines:
		begins, ends = sql_delta(line)
		depth += begins
		max_depth = max(max_depth, depth)
		depth -= ends
	return max_depth


def _collect_blocks(
	lines: Sequence[str],
	find: Callable[[str], Optional[str]],
	scan_end: Callable[[Sequence[str], int], Tuple[int, bool, int]],
	is_method: Optional[Callable[[str], bool]] = None,
) -> List[Block]:
	blocks: List[Block] = []
	idx = 0
	while idx < len(lines):
		name = find(lines[idx])
		if name is None:
			idx += 1
			continue
		end, closed, max_depth = scan_end(lines, idx)
		methods = 0
		if is_method is not None:
			methods = sum(1 for line in lines[idx:end + 1] if is_method(line))
		blocks.append(Block(name=name, start=idx, end=end, closed=closed, max_depth=max_depth, methods=methods))
		# Declarations nested inside a located block are not visited again.
		idx = max(end, idx) + 1
	return blocks


def _first_name(signatures: List[Signature]) -> Optional[str]:
	return signatures[0].name if signatures else None


def _first_group(pattern: re.Pattern, line: str) -> Optional[str]:
	m = pattern.search(line)
	return m.group(1) if m else None


def csharp_methods(lines: Sequence[str]) -> List[Block]:
	return _collect_blocks(lines, lambda line: _first_name(csharp_signatures(line)), brace_block_end)


def csharp_classes(lines: Sequence[str]) -> List[Block]:
	return _collect_blocks(
		lines,
		lambda line: _first_group(CSHARP_CLASS_RE, line),
		brace_block_end,
		is_method=lambda line: bool(csharp_signatures(line)),
	)


def vb_methods(lines: Sequence[str]) -> List[Block]:
	bodiless = vb_bodiless_lines(lines)
	masked = ["" if idx in bodiless else line for idx, line in enumerate(lines)]
	return _collect_blocks(
		masked,
		lambda line: _first_name(vb_signatures(line)),
		lambda ls, start: vb_block_end(ls, start, VB_METHOD_END_RE),
	)


def vb_classes(lines: Sequence[str]) -> List[Block]:
	return _collect_blocks(
		lines,
		lambda line: None if VB_CLASS_END_RE.search(line) else _first_group(VB_CLASS_RE, line),
		lambda ls, start: vb_block_end(ls, start, VB_CLASS_END_RE),
		is_method=lambda line: bool(vb_signatures(line)),
	)


def sql_procedures(lines: Sequence[str]) -> List[Block]:
	return _collect_blocks(lines, lambda line: _first_name(sql_signatures(line)), sql_block_end)
