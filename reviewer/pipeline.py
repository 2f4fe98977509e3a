from __future__ import annotations

import logging
from typing import List, Optional

from .config import ReviewerSettings, get_settings
from .detect import dialect_from_name
from .model import AnalysisResult, Dialect, Issue, Snippet
from .naming import check_names
from .rules import run_rules
from .smells import detect_smells
from .summarize import DEFAULT_SUMMARY, summarize


logger = logging.getLogger(__name__)


def analyze(text: Optional[str], dialect: Dialect, settings: Optional[ReviewerSettings] = None) -> AnalysisResult:
	"""Summarize a snippet and collect every finding for the given dialect.

	Issues are ordered by family (rules, then naming, then smells) and,
	within a family, in the order each detector emitted them.
	"""
	settings = settings or get_settings()
	snippet = Snippet.from_text(text)
	if snippet.is_blank:
		return AnalysisResult(summary=DEFAULT_SUMMARY)

	if not isinstance(dialect, Dialect):
		dialect = dialect_from_name(str(dialect))
	issues: List[Issue] = []
	issues.extend(run_rules(snippet, dialect, settings))
	issues.extend(check_names(snippet, dialect))
	issues.extend(detect_smells(snippet, dialect, settings))
	summary = summarize(snippet, dialect, settings)
	logger.debug("analyzed %d lines as %s: %d issues", len(snippet.lines), dialect.value, len(issues))
	return AnalysisResult(summary=summary, issues=tuple(issues))
