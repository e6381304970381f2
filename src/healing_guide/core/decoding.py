"""Decode raw provider text into validated models.

Provider answers may arrive wrapped in markdown code fences. Anything that
does not decode into the expected shape raises `ProviderResponseError` so the
retry scheduler can try again.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from .exceptions import ProviderResponseError
from .models import CandidateResult, SymptomDocument


def strip_code_fences(text: str) -> str:
    """Remove every ```json / ``` marker and surrounding whitespace."""
    return text.replace("```json", "").replace("```", "").strip()


def parse_json(text: str) -> Any:
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        preview = cleaned[:200]
        raise ProviderResponseError(f"Provider returned invalid JSON ({e.msg}): {preview!r}") from e


def decode_document(text: str, fallback_name: str | None = None) -> SymptomDocument:
    """Decode a healing guide, rejecting anything incomplete."""
    data = parse_json(text)
    if not isinstance(data, dict):
        raise ProviderResponseError(
            f"Expected a JSON object for the healing guide, got {type(data).__name__}"
        )

    try:
        document = SymptomDocument.model_validate(data)
    except ValidationError as e:
        raise ProviderResponseError(f"Healing guide failed validation: {e}") from e

    if not document.is_complete:
        raise ProviderResponseError("Healing guide is missing required field 'zona_detalle'")

    if not document.name and fallback_name:
        document = document.model_copy(update={"name": fallback_name})
    return document


def decode_candidates(text: str) -> list[CandidateResult]:
    """Decode a non-empty list of candidate matches."""
    data = parse_json(text)
    if not isinstance(data, list):
        raise ProviderResponseError(
            f"Expected a JSON array of candidates, got {type(data).__name__}"
        )
    if not data:
        raise ProviderResponseError("Provider returned no candidates")

    try:
        return [CandidateResult.model_validate(item) for item in data]
    except ValidationError as e:
        raise ProviderResponseError(f"Candidate list failed validation: {e}") from e
