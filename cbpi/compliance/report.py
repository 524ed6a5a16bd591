"""Markdown rendering of a compliance analysis."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from cbpi.compliance.models import ComplianceAnalysisResult, VerificationResult

if TYPE_CHECKING:
    from cbpi.instructions.catalog import InstructionCatalog

_RESULT_LABELS = {
    VerificationResult.CONFORME: "CONFORME",
    VerificationResult.NAO_CONFORME: "NÃO CONFORME",
    VerificationResult.PARCIAL: "PARCIAL",
    VerificationResult.NAO_APLICAVEL: "N/A",
    VerificationResult.PENDENTE: "PENDENTE",
}


def _cell(text: str | None) -> str:
    return (text or "").replace("|", "\\|").replace("\n", " ")


def render_markdown(
    result: ComplianceAnalysisResult,
    *,
    title: str = "Memorial descritivo",
    catalog: InstructionCatalog | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Render *result* as a Markdown document.

    When a *catalog* is given, each cited instruction is listed with its
    title under a references section.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    summary = result.summary
    lines: list[str] = []

    lines.append(f"# Análise de Conformidade — {title}")
    lines.append("")
    lines.append(f"**Conformidade:** {result.conformity}%")
    lines.append(f"**Gerado em:** {generated_at.strftime('%Y-%m-%d %H:%M UTC')}")
    lines.append("")
    lines.append(
        f"**Itens:** {summary.total} verificados — {summary.conforme} conformes, "
        f"{summary.nao_conforme} não conformes, {summary.parcial} parciais, "
        f"{summary.nao_aplicavel} não aplicáveis, {summary.pendente} pendentes"
    )
    lines.append("")

    if result.items:
        lines.append("## Itens verificados")
        lines.append("")
        lines.append("| Resultado | Item | IT | Severidade | Observação |")
        lines.append("|-----------|------|----|------------|------------|")
        for item in result.items:
            lines.append(
                f"| {_RESULT_LABELS[item.result]} | {_cell(item.item)} | "
                f"{item.reference_code} | {item.severity.value} | {_cell(item.observation)} |"
            )
        lines.append("")

    if result.critical_issues:
        lines.append("## Problemas críticos")
        lines.append("")
        for item in result.critical_issues:
            lines.append(f"- **{item.reference_code}** — {item.item}")
            lines.append(f"  {item.observation}")
        lines.append("")

    lines.append("## Recomendações")
    lines.append("")
    for rec in result.recommendations:
        lines.append(f"- {rec}")
    lines.append("")

    to_fix = [
        i for i in result.items
        if i.suggestion
        and i.result in (VerificationResult.NAO_CONFORME, VerificationResult.PARCIAL)
    ]
    if to_fix:
        lines.append("## Sugestões")
        lines.append("")
        for item in to_fix:
            lines.append(f"- {item.item}: {item.suggestion}")
        lines.append("")

    if catalog is not None:
        codes = sorted({i.reference_code for i in result.items})
        lines.append("## Instruções técnicas referenciadas")
        lines.append("")
        for code in codes:
            instruction = catalog.get(code)
            label = instruction.title if instruction else "não catalogada"
            lines.append(f"- {code}: {label}")
        lines.append("")

    return "\n".join(lines)
