"""Loading and saving diagnostic inputs as YAML or JSON files."""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from impactlens.core.errors import InputValidationError
from impactlens.schemas.inputs import DiagnosticInputs


class _LiteralStr(str):
    """Marker so multi-line section text is dumped as a YAML block scalar."""


def _literal_representer(dumper: yaml.SafeDumper, value: _LiteralStr):
    style = "|" if "\n" in value else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", value, style=style)


class _InputsDumper(yaml.SafeDumper):
    pass


_InputsDumper.add_representer(_LiteralStr, _literal_representer)


def load_inputs(path: Path) -> DiagnosticInputs:
    """
    Load inputs from a YAML or JSON mapping of section keys to text.

    Missing sections default to empty text; unknown keys are rejected.

    Raises:
        InputValidationError: If the file cannot be read or has the wrong shape
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputValidationError(f"Could not read inputs file {path}: {e}") from e

    try:
        if path.suffix == ".json":
            data = json.loads(content)
        else:
            # Every section is free text; keep "No", "yes" and bare numbers as written
            data = yaml.load(content, Loader=yaml.BaseLoader)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InputValidationError(f"Could not parse inputs file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InputValidationError(
            f"Inputs file {path} must contain a mapping of section names to text"
        )

    try:
        return DiagnosticInputs.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(x) for x in err['loc']) or '(root)'}: {err['msg']}" for err in e.errors()
        )
        raise InputValidationError(f"Invalid inputs file {path}: {problems}") from e


def dump_inputs(inputs: DiagnosticInputs, path: Path) -> None:
    """Write inputs using camelCase section keys, in form order."""
    path = Path(path)
    data = inputs.to_file_dict()
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix == ".json":
        content = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        content = yaml.dump(
            {key: _LiteralStr(value) for key, value in data.items()},
            Dumper=_InputsDumper,
            sort_keys=False,
            allow_unicode=True,
        )
    path.write_text(content, encoding="utf-8")
