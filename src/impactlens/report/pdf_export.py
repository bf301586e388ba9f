"""PDF rendering of the report view."""

import io
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    HRFlowable,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

# ─── Palette ──────────────────────────────────────────────────────────────────
INK = HexColor("#0F172A")
MUTED = HexColor("#64748B")
LINE = HexColor("#E2E8F0")
BRAND = HexColor("#4F46E5")
GREEN = HexColor("#059669")
ROSE = HexColor("#E11D48")
DARK_PANEL = HexColor("#1E293B")

CONFIDENCE_COLORS = {
    "high": HexColor("#065F46"),
    "medium": HexColor("#92400E"),
    "low": HexColor("#9F1239"),
}


def make_styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "Title", parent=base["Title"], fontSize=24, leading=30, textColor=INK,
            alignment=0, spaceAfter=10, fontName="Helvetica-Bold",
        ),
        "h2": ParagraphStyle(
            "H2", parent=base["Heading2"], fontSize=15, leading=20, textColor=INK,
            spaceBefore=14, spaceAfter=6, fontName="Helvetica-Bold",
        ),
        "h3": ParagraphStyle(
            "H3", parent=base["Heading3"], fontSize=10, leading=14, textColor=BRAND,
            spaceBefore=8, spaceAfter=4, fontName="Helvetica-Bold",
        ),
        "body": ParagraphStyle(
            "Body", parent=base["Normal"], fontSize=10, leading=14, textColor=INK,
            spaceAfter=4, fontName="Helvetica",
        ),
        "bullet": ParagraphStyle(
            "Bullet", parent=base["Normal"], fontSize=10, leading=14, textColor=INK,
            leftIndent=14, bulletIndent=4, spaceAfter=3, fontName="Helvetica",
        ),
        "evidence": ParagraphStyle(
            "Evidence", parent=base["Normal"], fontSize=8.5, leading=12, textColor=MUTED,
            leftIndent=14, spaceAfter=3, fontName="Courier",
        ),
        "meta": ParagraphStyle(
            "Meta", parent=base["Normal"], fontSize=8.5, leading=12, textColor=MUTED,
            fontName="Helvetica-Bold",
        ),
        "panel": ParagraphStyle(
            "Panel", parent=base["Normal"], fontSize=9.5, leading=13, textColor=white,
            fontName="Helvetica",
        ),
        "footer": ParagraphStyle(
            "Footer", parent=base["Normal"], fontSize=8, leading=11, textColor=MUTED,
            alignment=1, fontName="Helvetica-Oblique",
        ),
    }


def markup(text: str) -> str:
    """Escape text for reportlab paragraphs and render ``**bold**`` spans as <b>."""
    parts = escape(text or "").split("**")
    return "".join(f"<b>{part}</b>" if index % 2 == 1 else part for index, part in enumerate(parts))


def _bullets(items: list[str], style: ParagraphStyle) -> list[Paragraph]:
    return [Paragraph(markup(item), style, bulletText="•") for item in items]


def _evidence(snippets: list[str], style: ParagraphStyle) -> list[Paragraph]:
    return [Paragraph(f"“{escape(snippet)}”", style) for snippet in snippets]


def _context_block(ctx: dict[str, Any], styles: dict, accent) -> KeepTogether:
    title_style = ParagraphStyle("ContextTitle", parent=styles["body"], textColor=accent,
                                 fontName="Helvetica-Bold")
    flow = [Paragraph(markup(ctx["context"]), title_style)]
    if ctx["rationale"]:
        flow.append(Paragraph(markup(ctx["rationale"]), styles["body"]))
    flow.extend(_evidence(ctx["evidence"], styles["evidence"]))
    return KeepTogether(flow)


def _tradeoff_table(tradeoffs: list[dict[str, str]], styles: dict) -> Table:
    header = ParagraphStyle("PanelHeader", parent=styles["panel"], fontName="Helvetica-Bold")
    rows = [[Paragraph("Trade-off", header), Paragraph("Upside", header), Paragraph("Cost", header)]]
    for t in tradeoffs:
        rows.append([
            Paragraph(markup(t["tradeoff"]), styles["panel"]),
            Paragraph(markup(t["upside"]), styles["panel"]),
            Paragraph(markup(t["cost"]), styles["panel"]),
        ])
    table = Table(rows, colWidths=["34%", "33%", "33%"], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), DARK_PANEL),
        ("BACKGROUND", (0, 0), (-1, 0), INK),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LINEBELOW", (0, 0), (-1, -1), 0.5, HexColor("#334155")),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ("LEFTPADDING", (0, 0), (-1, -1), 8),
    ]))
    return table


def render_pdf(view: dict[str, Any]) -> bytes:
    """Render the report view as an A4 PDF document."""
    styles = make_styles()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
        topMargin=16 * mm,
        bottomMargin=16 * mm,
        title=view["headline"],
        author="Impact Lens",
    )

    confidence_color = CONFIDENCE_COLORS.get(view["confidence"], MUTED).hexval()[2:]
    story = [
        Paragraph(
            f"<font color='#{confidence_color}'>CONFIDENCE: {escape(view['confidence'].upper())}</font>"
            f" &nbsp;·&nbsp; LENS: {escape(view['viewer'].upper())}"
            f" &nbsp;·&nbsp; {escape(view['version'])}",
            styles["meta"],
        ),
        Spacer(1, 4 * mm),
        Paragraph(markup(view["headline"]), styles["title"]),
        HRFlowable(width="100%", thickness=0.8, color=LINE, spaceAfter=6, spaceBefore=2),
        Paragraph("Executive Summary", styles["h3"]),
        *_bullets(view["summary"], styles["bullet"]),
        Paragraph(markup(view["lens"]["title"]), styles["h3"]),
        *_bullets(view["lens"]["bullets"], styles["bullet"]),
        Paragraph("Systemic Effects Timeline", styles["h2"]),
    ]

    for event in view["timeline"]:
        block = [Paragraph(f"{event['index']}. {escape(event['label']).upper()}", styles["h3"])]
        for effect in event["effects"]:
            block.append(Paragraph(markup(effect["claim"]), styles["bullet"], bulletText="•"))
            block.extend(_evidence(effect["evidence"], styles["evidence"]))
        story.append(KeepTogether(block))

    story.append(Paragraph("High-Impact Environments", styles["h2"]))
    story.extend(_context_block(ctx, styles, GREEN) for ctx in view["best_fit"])

    story.append(Paragraph("Friction Points", styles["h2"]))
    story.extend(_context_block(ctx, styles, ROSE) for ctx in view["toxic"])

    story.append(Paragraph("Failure Mode Analysis", styles["h2"]))
    for mode in view["failure_modes"]:
        story.append(KeepTogether([
            Paragraph(markup(mode["mode"]), styles["h3"]),
            Paragraph(f"<b>Trigger:</b> {markup(mode['trigger'])}", styles["body"]),
            Paragraph(f"<b>Symptom:</b> {markup(mode['symptom'])}", styles["body"]),
            Paragraph(f"<b>Mitigation:</b> {markup(mode['mitigation'])}", styles["body"]),
        ]))

    story.append(Paragraph("Operational Trade-offs", styles["h2"]))
    if view["tradeoffs"]:
        story.append(_tradeoff_table(view["tradeoffs"], styles))

    story.append(Paragraph("Incompatibility Flags", styles["h2"]))
    story.extend(_bullets(view["flags"], styles["bullet"]))

    story.append(Paragraph("Validation Protocols", styles["h2"]))
    for hook in view["proof_hooks"]:
        story.append(Paragraph(markup(hook["claim_to_validate"]), styles["bullet"], bulletText="•"))
        story.append(Paragraph(f"Verify: {markup(hook['how_to_check'])}", styles["evidence"]))

    story.extend([
        Spacer(1, 8 * mm),
        HRFlowable(width="100%", thickness=0.5, color=LINE, spaceAfter=4),
        Paragraph(
            f"Impact Lens • AI Diagnostic Engine • {escape(view['confidence_notes'])}",
            styles["footer"],
        ),
    ])

    doc.build(story)
    return buffer.getvalue()
