from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Dialect(str, Enum):
	UNKNOWN = "Unknown"
	CSHARP = "CSharp"
	VBNET = "VBNet"
	SQL = "SQL"

	@property
	def display_name(self) -> str:
		return self.value


class Severity(str, Enum):
	INFO = "Info"
	WARNING = "Warning"
	ERROR = "Error"


class Snippet(BaseModel):
	"""Source text plus its line split. Built once per analysis."""

	model_config = ConfigDict(frozen=True)

	text: str
	lines: Tuple[str, ...]

	@classmethod
	def from_text(cls, text: Optional[str]) -> "Snippet":
		text = text or ""
		normalized = text.replace("\r\n", "\n").replace("\r", "\n")
		return cls(text=text, lines=tuple(normalized.split("\n")))

	@property
	def is_blank(self) -> bool:
		return not self.text.strip()


class Issue(BaseModel):
	model_config = ConfigDict(frozen=True, populate_by_name=True)

	kind: str = Field(alias="type")
	line_number: Optional[int] = Field(default=None, alias="lineNumber")
	message: str
	suggestion: str
	severity: Severity = Severity.INFO


class AnalysisResult(BaseModel):
	model_config = ConfigDict(frozen=True)

	summary: str
	issues: Tuple[Issue, ...] = ()
