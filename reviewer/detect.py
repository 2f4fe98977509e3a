from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from .model import Dialect


logger = logging.getLogger(__name__)

# Evaluated top to bottom, first tier with any marker present wins.
DIALECT_MARKERS: Tuple[Tuple[Dialect, Tuple[str, ...]], ...] = (
	(Dialect.CSHARP, ("using ", "namespace", "public class", "void")),
	(Dialect.VBNET, ("imports ", "module", "sub", "end sub")),
	(Dialect.SQL, ("select ", "insert ", "update ", "create table")),
)

DIALECT_NAMES: Dict[str, Dialect] = {d.value.upper(): d for d in Dialect}


def detect(text: Optional[str]) -> Dialect:
	"""Classify a snippet by case-insensitive marker substrings."""
	if not text or not text.strip():
		return Dialect.UNKNOWN
	lowered = text.lower()
	for dialect, markers in DIALECT_MARKERS:
		if any(marker in lowered for marker in markers):
			logger.debug("detected %s", dialect.value)
			return dialect
	return Dialect.UNKNOWN


def dialect_from_name(name: Optional[str]) -> Dialect:
	return DIALECT_NAMES.get((name or "").strip().upper(), Dialect.UNKNOWN)
