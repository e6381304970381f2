"""Data models for healing guides, candidate matches and cache rows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class SymptomDocument(BaseModel):
    """A complete healing guide for one symptom.

    Field aliases are the JSON keys used by the provider prompt and by the
    catalog/cache tables, so documents round-trip through storage unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    short_definition: str = Field("", alias="shortDefinition")
    body_zone: str = Field("", alias="zona_detalle")
    emotional_content: str = Field("", alias="emociones_detalle")
    example_phrases: list[str] = Field(default_factory=list, alias="frases_tipicas")
    connection_exercise: str = Field("", alias="ejercicio_conexion")
    physical_alternatives: str = Field("", alias="alternativas_fisicas")
    aromatherapy: str = Field("", alias="aromaterapia_sahumerios")
    natural_remedies: str = Field("", alias="remedios_naturales")
    spiritual_guidance: str = Field("", alias="angeles_arcangeles")
    holistic_therapies: str = Field("", alias="terapias_holisticas")
    guided_meditation: str = Field("", alias="meditacion_guiada")
    additional_recommendations: str = Field("", alias="recomendaciones_adicionales")
    daily_routine: str = Field("", alias="rutina_integral")

    @property
    def is_complete(self) -> bool:
        """A document is servable only when its body-zone section exists."""
        return bool(self.body_zone and self.body_zone.strip())

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class CandidateResult(BaseModel):
    """One short search match."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    emotional_meaning: str = Field("", alias="emotionalMeaning")
    conflict: str = ""
    category: str = ""
    is_fallback: bool | None = Field(None, alias="isFallback")
    error_message: str | None = Field(None, alias="errorMessage")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CatalogEntry(BaseModel):
    slug: str
    document: SymptomDocument


class CacheEntry(BaseModel):
    slug: str
    name: str
    document: SymptomDocument
    stored_at: datetime | None = None


class SearchCacheEntry(BaseModel):
    search_key: str
    results: list[CandidateResult]


@dataclass(frozen=True)
class SearchOk:
    """Candidate list produced normally, from the search cache or the provider."""

    results: list[CandidateResult]
    source: Literal["cache", "provider"]

    degraded = False

    def to_payload(self) -> list[dict[str, Any]]:
        return [r.to_payload() for r in self.results]


@dataclass(frozen=True)
class SearchDegraded:
    """Built-in substitute list returned after a failed search."""

    results: list[CandidateResult]
    reason: str

    degraded = True

    def to_payload(self) -> list[dict[str, Any]]:
        payload = [r.to_payload() for r in self.results]
        if payload:
            payload[0]["isFallback"] = True
            payload[0]["errorMessage"] = self.reason
        return payload


SearchOutcome = SearchOk | SearchDegraded


class RegenerationStatus(str, Enum):
    REGENERATED = "regenerated"
    CATALOG = "catalog"
    FAILED = "failed"
