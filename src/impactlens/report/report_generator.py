"""Report rendering and export for diagnostic anti-portfolios."""

import json
from pathlib import Path
from typing import Any, Optional

from impactlens.schemas.inputs import VIEWER_PROFILES
from impactlens.schemas.report import AntiPortfolioData, ContextItem

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

# Display limits; the report itself may hold more items.
LENS_BULLET_LIMIT = 3
EFFECTS_PER_HORIZON = 2
EVIDENCE_PER_EFFECT = 1
FAILURE_MODE_LIMIT = 2
FLAG_LIMIT = 3
PROOF_HOOK_LIMIT = 2

EXPORT_FORMATS = ("json", "markdown", "html", "pdf")
FORMAT_EXTENSIONS = {"json": ".json", "markdown": ".md", "html": ".html", "pdf": ".pdf"}


def horizon_label(horizon: str) -> str:
    """'2_weeks' -> '2 weeks'."""
    return horizon.replace("_", " ", 1)


def default_basename(report: AntiPortfolioData) -> str:
    return f"impact-lens-report-{report.meta.viewer.value}"


def _context_view(ctx: ContextItem, rationale: Optional[str]) -> dict[str, Any]:
    return {"context": ctx.context, "rationale": rationale or "", "evidence": list(ctx.evidence)}


class ReportRenderer:
    """Projects a validated report into a display view and export formats."""

    def __init__(self):
        """Initialize report renderer."""
        self.markdown_template = (TEMPLATES_DIR / "report_template.md").read_text(encoding="utf-8")

    def build_view(self, report: AntiPortfolioData) -> dict[str, Any]:
        """
        Build the presentation view of a report with display limits applied.

        The report is not modified; truncated lists are fresh copies.

        Args:
            report: Validated report

        Returns:
            Plain dict consumed by the markdown, HTML and PDF renderers
        """
        viewer = report.meta.viewer
        return {
            "headline": report.headline,
            "viewer": viewer.value,
            "viewer_label": VIEWER_PROFILES[viewer].label,
            "language": report.meta.language,
            "version": report.meta.version,
            "confidence": report.confidence.overall,
            "confidence_notes": report.confidence.notes,
            "summary": list(report.diagnosis_summary),
            "lens": {
                "title": report.viewer_lens_section.title,
                "bullets": report.viewer_lens_section.bullets[:LENS_BULLET_LIMIT],
            },
            "timeline": [
                {
                    "index": index,
                    "horizon": event.horizon,
                    "label": horizon_label(event.horizon),
                    "effects": [
                        {
                            "claim": effect.claim,
                            "confidence": effect.confidence,
                            "evidence": effect.evidence[:EVIDENCE_PER_EFFECT],
                        }
                        for effect in event.effects[:EFFECTS_PER_HORIZON]
                    ],
                }
                for index, event in enumerate(report.systemic_effects_timeline, start=1)
            ],
            "best_fit": [_context_view(ctx, ctx.why) for ctx in report.best_fit_contexts],
            "toxic": [_context_view(ctx, ctx.failure_pattern) for ctx in report.toxic_contexts],
            "failure_modes": [
                mode.model_dump() for mode in report.failure_modes[:FAILURE_MODE_LIMIT]
            ],
            "tradeoffs": [t.model_dump() for t in report.tradeoffs],
            "flags": report.dont_work_with_me_if[:FLAG_LIMIT],
            "proof_hooks": [hook.model_dump() for hook in report.proof_hooks[:PROOF_HOOK_LIMIT]],
        }

    def to_json(self, report: AntiPortfolioData) -> str:
        """Full structured dump, without display limits."""
        return json.dumps(report.model_dump(mode="json"), indent=2, ensure_ascii=False)

    def to_markdown(self, report: AntiPortfolioData) -> str:
        """
        Generate a markdown document with the same sections as the rendered report.

        ``**bold**`` markup in model text is kept as markdown emphasis.
        """
        view = self.build_view(report)

        def bullets(items: list[str]) -> str:
            return "\n".join(f"- {item}" for item in items) if items else "None"

        timeline_blocks = []
        for event in view["timeline"]:
            lines = [f"### {event['label']}", ""]
            for effect in event["effects"]:
                lines.append(f"- **{effect['claim']}** _(confidence: {effect['confidence']})_")
                for snippet in effect["evidence"]:
                    lines.append(f"  - Evidence: \"{snippet}\"")
            timeline_blocks.append("\n".join(lines))

        def contexts(items: list[dict[str, Any]]) -> str:
            if not items:
                return "None"
            blocks = []
            for ctx in items:
                lines = [f"### {ctx['context']}", ""]
                if ctx["rationale"]:
                    lines.extend([ctx["rationale"], ""])
                lines.extend(f"- Evidence: \"{snippet}\"" for snippet in ctx["evidence"])
                blocks.append("\n".join(lines).rstrip())
            return "\n\n".join(blocks)

        failure_blocks = [
            f"### {mode['mode']}\n\n"
            f"- **Trigger:** {mode['trigger']}\n"
            f"- **Symptom:** {mode['symptom']}\n"
            f"- **Mitigation:** {mode['mitigation']}"
            for mode in view["failure_modes"]
        ]
        tradeoff_lines = [
            f"- **{t['tradeoff']}**\n  - Upside: {t['upside']}\n  - Cost: {t['cost']}"
            for t in view["tradeoffs"]
        ]
        hook_lines = [
            f"- **{hook['claim_to_validate']}**\n  - Verify: {hook['how_to_check']}"
            for hook in view["proof_hooks"]
        ]

        return self.markdown_template.format(
            headline=view["headline"],
            confidence=view["confidence"],
            viewer_label=view["viewer_label"],
            version=view["version"],
            summary=bullets(view["summary"]),
            lens_title=view["lens"]["title"],
            lens_bullets=bullets(view["lens"]["bullets"]),
            timeline="\n\n".join(timeline_blocks) if timeline_blocks else "None",
            best_fit=contexts(view["best_fit"]),
            toxic=contexts(view["toxic"]),
            failure_modes="\n\n".join(failure_blocks) if failure_blocks else "None",
            tradeoffs="\n".join(tradeoff_lines) if tradeoff_lines else "None",
            flags=bullets(view["flags"]),
            proof_hooks="\n".join(hook_lines) if hook_lines else "None",
            confidence_notes=view["confidence_notes"],
        )

    def to_html(self, report: AntiPortfolioData) -> str:
        """Standalone styled HTML document."""
        from impactlens.report.html_export import render_html

        return render_html(self.build_view(report))

    def to_pdf(self, report: AntiPortfolioData) -> bytes:
        """Paginated PDF document."""
        from impactlens.report.pdf_export import render_pdf

        return render_pdf(self.build_view(report))

    def render(self, report: AntiPortfolioData, fmt: str) -> str | bytes:
        """Render one export format ('json', 'markdown', 'html' or 'pdf')."""
        fmt = fmt.strip().lower()
        if fmt == "md":
            fmt = "markdown"
        if fmt == "json":
            return self.to_json(report)
        if fmt == "markdown":
            return self.to_markdown(report)
        if fmt == "html":
            return self.to_html(report)
        if fmt == "pdf":
            return self.to_pdf(report)
        raise ValueError(f"Unknown export format: {fmt}. Supported formats: {', '.join(EXPORT_FORMATS)}")

    def export(
        self,
        report: AntiPortfolioData,
        fmt: str,
        output_dir: Path,
        basename: Optional[str] = None,
    ) -> Path:
        """
        Write one export format to ``output_dir``.

        Args:
            report: Validated report
            fmt: Export format
            output_dir: Directory to write into (created if needed)
            basename: File name without extension (default: impact-lens-report-<viewer>)

        Returns:
            Path of the written file
        """
        content = self.render(report, fmt)
        fmt = "markdown" if fmt.strip().lower() == "md" else fmt.strip().lower()

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / f"{basename or default_basename(report)}{FORMAT_EXTENSIONS[fmt]}"

        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path
