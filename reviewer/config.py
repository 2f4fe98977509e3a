from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReviewerSettings(BaseSettings):
	"""Thresholds for every rule family.

	Values can be overridden with ``SNIPPET_REVIEW_*`` environment variables,
	e.g. ``SNIPPET_REVIEW_MAX_LINE_LENGTH=100``.
	"""

	model_config = SettingsConfigDict(
		env_prefix="SNIPPET_REVIEW_",
		case_sensitive=False,
		frozen=True,
	)

	max_line_length: int = Field(default=120, gt=0, description="Longest allowed CSharp line")
	max_if_count: int = Field(default=2, ge=0, description="'if' tokens allowed per CSharp method")
	max_nesting_depth: int = Field(default=3, ge=0, description="Deepest allowed block nesting")
	max_parameters: int = Field(default=5, ge=0, description="Parameters allowed per signature")
	max_structure_span: int = Field(default=300, gt=0, description="Lines allowed per class/procedure")
	max_methods: int = Field(default=10, ge=0, description="Methods allowed per class")
	literal_repeat_lines: int = Field(default=3, ge=2, description="Distinct lines that make a literal repeated")
	max_summary_length: int = Field(default=120, ge=2, description="Longest summary sentence")


@lru_cache(maxsize=1)
def get_settings() -> ReviewerSettings:
	return ReviewerSettings()
