"""Report rendering and export."""

from impactlens.report.report_generator import EXPORT_FORMATS, ReportRenderer

__all__ = ["ReportRenderer", "EXPORT_FORMATS"]
