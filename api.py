from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from reviewer.beautify import beautify
from reviewer.detect import DIALECT_NAMES, detect
from reviewer.model import Issue
from reviewer.pipeline import analyze as analyze_snippet


logger = logging.getLogger("reviewer.api")

app = FastAPI(title="Snippet Reviewer")


class AnalyzeRequest(BaseModel):
	code: str
	dialect: Optional[str] = None


class AnalyzeResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	summary: str
	language: str
	issues: List[Issue] = []
	beautified_code: str = Field(default="", alias="beautifiedCode")


@app.get("/health")
def health() -> dict:
	return {"status": "ok"}


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest) -> AnalyzeResponse:
	if req.dialect is not None:
		dialect = DIALECT_NAMES.get(req.dialect.strip().upper())
		if dialect is None:
			raise HTTPException(status_code=400, detail=f"Unknown dialect: {req.dialect}")
	else:
		dialect = detect(req.code)

	result = analyze_snippet(req.code, dialect)
	logger.info("analyzed snippet as %s: %d issues", dialect.value, len(result.issues))
	return AnalyzeResponse(
		summary=result.summary,
		language=dialect.display_name,
		issues=result.issues,
		beautified_code=beautify(req.code, dialect),
	)


def create_app() -> FastAPI:
	return app
