"""CLI interface for ImpactLens."""

import json
import sys
import time
from pathlib import Path

import click

from impactlens.cli.formatters import OutputFormatter
from impactlens.cli.interactive import confirm_overwrite, edit_sections, interactive_config
from impactlens.core.config import Config
from impactlens.core.errors import DiagnosticError
from impactlens.core.inputs_file import dump_inputs, load_inputs
from impactlens.schemas.inputs import DEFAULT_INPUTS, DEFAULT_VIEWER, ViewerType
from impactlens.schemas.report import build_response_schema

VIEWER_CHOICES = [viewer.value for viewer in ViewerType]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_formats(output_format: str) -> list[str]:
    """Split a comma-separated format list, keeping order and dropping duplicates."""
    from impactlens.report import EXPORT_FORMATS

    formats: list[str] = []
    for fmt in output_format.split(","):
        fmt = fmt.strip().lower()
        if fmt == "md":
            fmt = "markdown"
        if not fmt:
            continue
        if fmt not in EXPORT_FORMATS:
            raise click.BadParameter(
                f"'{fmt}' is not one of {', '.join(EXPORT_FORMATS)}",
                param_hint="'--format'",
            )
        if fmt not in formats:
            formats.append(fmt)
    if not formats:
        raise click.BadParameter("at least one format is required", param_hint="'--format'")
    return formats


def _load_inputs_or_exit(inputs_path: str, formatter: OutputFormatter):
    try:
        return load_inputs(Path(inputs_path))
    except DiagnosticError as e:
        formatter.print_error(str(e))
        sys.exit(1)


@click.group()
@click.version_option()
def main():
    """
    ImpactLens - Diagnostic anti-portfolio generator.

    Turns seven sections of free-text work history into a structured report
    of how a person behaves inside teams and systems, written for one viewer
    lens (founder, recruiter, team member, client or self).

    Requires a Google AI Gemini API key (GEMINI_API_KEY).

    Use 'impactlens generate --help' for detailed usage information.
    """
    pass


@main.command()
@click.argument("path", type=click.Path(dir_okay=False), default="inputs.yaml")
@click.option(
    "--empty",
    is_flag=True,
    default=False,
    help="Write empty sections instead of the example text",
)
@click.option("--yes", "-y", is_flag=True, default=False, help="Overwrite without asking")
def init(path: str, empty: bool, yes: bool):
    """
    Write an inputs file to fill in.

    PATH defaults to inputs.yaml; use a .json suffix for JSON.
    """
    from impactlens.schemas.inputs import DiagnosticInputs

    formatter = OutputFormatter()
    if not yes and not confirm_overwrite(path):
        formatter.print_warning("Aborted.")
        sys.exit(1)

    inputs = DiagnosticInputs.empty() if empty else DEFAULT_INPUTS
    dump_inputs(inputs, Path(path))
    formatter.print_success(f"Inputs template written to {path}")


@main.command()
@click.argument("inputs_path", metavar="INPUTS", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--viewer",
    "-v",
    type=click.Choice(VIEWER_CHOICES, case_sensitive=False),
    default=None,
    help="Viewer lens (default: recruiter)",
)
@click.option(
    "--attach",
    "-a",
    "attach",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Attach a document or image (repeatable)",
)
@click.option(
    "--system",
    "show_system",
    is_flag=True,
    default=False,
    help="Also print the system instruction",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file (YAML or JSON)",
)
def prompt(inputs_path: str, viewer: str | None, attach: tuple[str, ...], show_system: bool, config: str | None):
    """
    Print the request that would be sent to the model.

    Nothing is sent; no API key is needed.
    """
    from impactlens.assembler.prompt_assembler import PromptAssembler
    from impactlens.core.attachments import read_attachment

    formatter = OutputFormatter()
    config_obj = Config.load({"viewer": viewer}, Path(config) if config else None)
    try:
        selected_viewer = ViewerType(str(config_obj.viewer).lower())
    except ValueError as e:
        formatter.print_error(f"Invalid configuration: {e}")
        sys.exit(1)

    inputs = _load_inputs_or_exit(inputs_path, formatter)

    try:
        attachments = [read_attachment(Path(p)) for p in attach]
    except DiagnosticError as e:
        formatter.print_error(str(e))
        sys.exit(1)

    assembler = PromptAssembler(language=config_obj.language, version=config_obj.prompt_version)
    request = assembler.assemble(inputs, selected_viewer, attachments)

    if show_system:
        formatter.print_prompt("System instruction", request.system_instruction)
    formatter.print_prompt(f"Request ({request.viewer.value} lens)", request.text)


@main.command()
@click.argument("inputs_path", metavar="INPUTS", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--viewer",
    "-v",
    type=click.Choice(VIEWER_CHOICES, case_sensitive=False),
    default=None,
    help="Viewer lens (default: recruiter)",
)
@click.option(
    "--attach",
    "-a",
    "attach",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Attach a document or image: .pdf .txt .md .doc .docx .png .jpg .jpeg (repeatable)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    default=None,
    help="Export format(s), comma-separated: markdown,json,html,pdf (default: markdown)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for exported files (default: current directory)",
)
@click.option(
    "--api-key",
    default=None,
    help="Gemini API key (or use GEMINI_API_KEY env var)",
)
@click.option(
    "--model",
    "-m",
    default=None,
    help="Model name (default: gemini-2.5-flash)",
)
@click.option(
    "--temperature",
    "-t",
    type=float,
    default=None,
    help="Temperature for generation (default: 0.7)",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file (YAML or JSON)",
)
@click.option(
    "--interactive",
    "-i",
    is_flag=True,
    default=False,
    help="Interactive mode: pick the lens, edit sections, confirm settings",
)
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    default=False,
    help="Skip confirmations in interactive mode",
)
@click.option(
    "--stats/--no-stats",
    default=True,
    help="Show generation statistics (default: enabled)",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="Force colored output (default: auto-detect)",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (default: WARNING)",
)
@click.option(
    "--log-file",
    type=click.Path(),
    default=None,
    help="Path to log file (default: stderr)",
)
@click.option(
    "--json-logging",
    is_flag=True,
    default=False,
    help="Output logs in JSON format",
)
def generate(
    inputs_path: str,
    viewer: str | None,
    attach: tuple[str, ...],
    output_format: str | None,
    output_dir: str | None,
    api_key: str | None,
    model: str | None,
    temperature: float | None,
    config: str | None,
    interactive: bool,
    yes: bool,
    stats: bool,
    color: bool | None,
    log_level: str,
    log_file: str | None,
    json_logging: bool,
):
    """
    Generate a diagnostic anti-portfolio from an inputs file.

    INPUTS is a YAML or JSON file mapping section names (identity, workTraces,
    friction, failures, preferences, nonNegotiables, background) to text.
    Run 'impactlens init' to create one.

    Examples:

      # Recruiter lens, markdown report in the current directory
      impactlens generate inputs.yaml

      # Founder lens with an attached CV, all export formats
      impactlens generate inputs.yaml --viewer founder --attach cv.pdf -f markdown,json,html,pdf
    """
    from impactlens.core.logging import configure_logging

    configure_logging(level=log_level, json_output=json_logging, log_file=log_file)

    from impactlens.assembler.prompt_assembler import PromptAssembler
    from impactlens.core.diagnostic_client import DiagnosticClient
    from impactlens.core.gemini_client import GeminiClient
    from impactlens.core.session import DiagnosticSession
    from impactlens.report import ReportRenderer
    from impactlens.report.report_generator import FORMAT_EXTENSIONS, default_basename

    formatter = OutputFormatter(force_color=bool(color), no_color=(color is False))

    cli_config = {
        "viewer": viewer,
        "output_format": output_format,
        "output_dir": output_dir,
        "api_key": api_key,
        "model": model,
        "temperature": temperature,
    }
    config_obj = Config.load(cli_config, Path(config) if config else None)

    try:
        formats = _parse_formats(config_obj.output_format)
        selected_viewer = ViewerType(str(config_obj.viewer).lower())
    except (click.BadParameter, ValueError) as e:
        formatter.print_error(f"Invalid configuration: {e}")
        sys.exit(1)

    inputs = _load_inputs_or_exit(inputs_path, formatter)

    if interactive:
        config_obj.viewer = selected_viewer.value
        config_obj = interactive_config(config_obj, skip_confirmations=yes)
        selected_viewer = ViewerType(config_obj.viewer)
        if not yes:
            inputs = edit_sections(inputs)

    try:
        llm_client = GeminiClient(
            api_key=config_obj.resolve_api_key(),
            model=config_obj.model,
            temperature=config_obj.temperature,
        )
    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)

    assembler = PromptAssembler(language=config_obj.language, version=config_obj.prompt_version)
    session = DiagnosticSession(DiagnosticClient(llm_client, assembler), inputs, selected_viewer)

    start_time = time.time()
    try:
        for path in attach:
            session.attach_file(Path(path))
        if interactive and not yes:
            click.confirm(
                f"Generate a {selected_viewer.value} report with {len(session.attachments)} attachment(s)?",
                default=True,
                abort=True,
            )
        with formatter.err_console.status("Analyzing behavior patterns..."):
            report = session.generate()
    except DiagnosticError as e:
        formatter.print_error(str(e))
        sys.exit(1)
    elapsed = time.time() - start_time

    renderer = ReportRenderer()
    formatter.print_markdown(renderer.to_markdown(report))

    out_dir = config_obj.get_output_dir()
    written = []
    for fmt in formats:
        if interactive and not yes:
            existing = out_dir / f"{default_basename(report)}{FORMAT_EXTENSIONS[fmt]}"
            if not confirm_overwrite(str(existing)):
                formatter.print_warning(f"Skipped {existing}")
                continue
        path = renderer.export(report, fmt, out_dir)
        written.append(path)
        formatter.print_success(f"Report written to {path}")

    if stats:
        formatter.print_stats(
            {
                "viewer": report.meta.viewer.value,
                "model": llm_client.model,
                "attachments": len(session.attachments),
                "confidence": report.confidence.overall,
                "elapsed": f"{elapsed:.1f}s",
                "files_written": len(written),
            }
        )


@main.command()
@click.argument("report_path", metavar="REPORT_JSON", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "-f",
    "output_format",
    default="markdown",
    help="Export format(s), comma-separated: markdown,json,html,pdf (default: markdown)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for exported files (default: current directory)",
)
@click.option(
    "--print/--no-print",
    "show",
    default=True,
    help="Print the report to the terminal (default: enabled)",
)
def render(report_path: str, output_format: str, output_dir: str | None, show: bool):
    """
    Validate a saved JSON report and export it.

    REPORT_JSON is a report previously written with '--format json'.
    """
    from impactlens.core.diagnostic_client import DiagnosticClient
    from impactlens.report import ReportRenderer

    formatter = OutputFormatter()
    try:
        formats = _parse_formats(output_format)
    except click.BadParameter as e:
        formatter.print_error(e.format_message())
        sys.exit(1)

    try:
        text = Path(report_path).read_text(encoding="utf-8")
        report = DiagnosticClient.parse_response(text)
    except OSError as e:
        formatter.print_error(f"Could not read report {report_path}: {e}")
        sys.exit(1)
    except DiagnosticError as e:
        formatter.print_error(str(e))
        sys.exit(1)

    renderer = ReportRenderer()
    if show:
        formatter.print_markdown(renderer.to_markdown(report))

    out_dir = Path(output_dir) if output_dir else Path.cwd()
    for fmt in formats:
        path = renderer.export(report, fmt, out_dir)
        formatter.print_success(f"Report written to {path}")


@main.command()
@click.option("--raw", is_flag=True, default=False, help="Print plain JSON without highlighting")
def schema(raw: bool):
    """Print the response schema the model is constrained to."""
    response_schema = build_response_schema(Config.load().language)
    if raw:
        click.echo(json.dumps(response_schema, indent=2))
        return
    OutputFormatter().print_json(response_schema)


@main.command()
def viewers():
    """List the available viewer lenses."""
    OutputFormatter().print_viewers(DEFAULT_VIEWER)


if __name__ == "__main__":
    main()
