"""Interactive prompts for the CLI."""

import os

import click

from impactlens.core.config import Config
from impactlens.schemas.inputs import INPUT_SECTIONS, VIEWER_PROFILES, DiagnosticInputs, ViewerType


def prompt_viewer(default: str = "recruiter") -> ViewerType:
    """Prompt for the viewer lens."""
    click.echo("\nViewer lenses:")
    for viewer, profile in VIEWER_PROFILES.items():
        click.echo(f"  {viewer.value:<12} {profile.label}: {profile.description}")
    choice = click.prompt(
        "Viewer",
        type=click.Choice([v.value for v in ViewerType], case_sensitive=False),
        default=default,
        show_choices=False,
    )
    return ViewerType(choice.lower())


def prompt_temperature(default: float) -> float:
    return click.prompt(
        "Temperature (0.0-2.0)",
        type=click.FloatRange(0.0, 2.0),
        default=default,
    )


def edit_sections(inputs: DiagnosticInputs) -> DiagnosticInputs:
    """
    Offer to edit each input section in the user's editor.

    Sections the user skips, or closes the editor without saving, keep their text.

    Returns:
        Updated inputs (the original is not modified)
    """
    updates = {}
    for section in INPUT_SECTIONS:
        text = getattr(inputs, section.field)
        preview = text.strip().splitlines()[0][:60] if text.strip() else "(empty)"
        click.echo(f"\n{section.letter}. {section.label}: {preview}")
        if not click.confirm(f"  Edit {section.label.lower()}?", default=False):
            continue
        edited = click.edit(text)
        if edited is not None:
            updates[section.field] = edited.strip()
    return inputs.model_copy(update=updates)


def confirm_overwrite(filepath: str) -> bool:
    """Confirm before overwriting an existing file."""
    if not os.path.exists(filepath):
        return True

    return click.confirm(
        f"File '{filepath}' already exists. Overwrite?",
        default=False,
    )


def interactive_config(config: Config, skip_confirmations: bool = False) -> Config:
    """
    Interactively fill in generation settings.

    Args:
        config: Base configuration object
        skip_confirmations: If True, keep the configured values

    Returns:
        Updated configuration object
    """
    if skip_confirmations:
        return config

    config.viewer = prompt_viewer(config.viewer).value

    if not config.resolve_api_key():
        config.api_key = click.prompt("Gemini API key", hide_input=True)

    if click.confirm("Use custom temperature?", default=False):
        config.temperature = prompt_temperature(config.temperature)

    return config
