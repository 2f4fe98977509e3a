"""Heuristic reviewer for short CSharp, VB.NET and SQL snippets.

Modules:
- detect.py: Dialect classification by marker substrings.
- scan.py: Brace/keyword depth tracking and block boundary detection.
- rules.py: Fixed per-dialect rules and the rule registry.
- naming.py: Identifier extraction and naming heuristics.
- smells.py: Cross-dialect structural smells.
- summarize.py: One-sentence intent summary.
- pipeline.py: The analyze entry point combining all of the above.
- beautify.py: Cosmetic re-indentation used by the CLI and HTTP hosts.
"""

from .detect import detect, dialect_from_name
from .model import AnalysisResult, Dialect, Issue, Severity, Snippet
from .pipeline import analyze
from .rules import analyze_rules

__all__ = [
	"AnalysisResult",
	"Dialect",
	"Issue",
	"Severity",
	"Snippet",
	"analyze",
	"analyze_rules",
	"detect",
	"dialect_from_name",
]
