"""ProtocolService: MCP response building and result formatting."""

from mcp.types import CallToolResult, TextContent

from ...core.models import SearchOutcome, SymptomDocument

# Section title and attribute, in reading order.
DOCUMENT_SECTIONS = (
    ("Zona corporal", "body_zone"),
    ("Emociones", "emotional_content"),
    ("Ejercicio de conexión", "connection_exercise"),
    ("Alternativas físicas", "physical_alternatives"),
    ("Aromaterapia y sahumerios", "aromatherapy"),
    ("Remedios naturales", "natural_remedies"),
    ("Guía espiritual", "spiritual_guidance"),
    ("Terapias holísticas", "holistic_therapies"),
    ("Meditación guiada", "guided_meditation"),
    ("Recomendaciones", "additional_recommendations"),
    ("Rutina integral", "daily_routine"),
)


class ProtocolService:
    """Builds MCP tool results."""

    def build_text_response(self, text: str) -> CallToolResult:
        return CallToolResult(content=[TextContent(type="text", text=text)])

    def build_error_response(self, message: str) -> CallToolResult:
        return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)

    def format_document(self, document: SymptomDocument) -> str:
        """Render a healing guide as markdown."""
        lines = [f"# {document.name}", "", f"_{document.short_definition}_", ""]
        for title, attr in DOCUMENT_SECTIONS[:2]:
            lines.extend([f"## {title}", getattr(document, attr), ""])
        if document.example_phrases:
            lines.append("## Frases típicas")
            lines.extend(document.example_phrases)
            lines.append("")
        for title, attr in DOCUMENT_SECTIONS[2:]:
            value = getattr(document, attr)
            if value:
                lines.extend([f"## {title}", value, ""])
        return "\n".join(lines).rstrip() + "\n"

    def format_search_outcome(self, query: str, outcome: SearchOutcome) -> str:
        lines = []
        if outcome.degraded:
            lines.append(f"⚠️ Search unavailable ({outcome.reason}); showing common symptoms instead.\n")
        else:
            lines.append(f"Found {len(outcome.results)} results for query: '{query}'\n")
        for i, result in enumerate(outcome.results, 1):
            lines.append(f"{i}. **{result.name}** ({result.category})")
            if result.emotional_meaning:
                lines.append(f"   - Significado: {result.emotional_meaning}")
            if result.conflict:
                lines.append(f"   - Conflicto: {result.conflict}")
        return "\n".join(lines)
