"""Structured logging for ImpactLens."""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pythonjsonlogger import jsonlogger


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _make_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class StructuredLogger:
    """
    Structured logger with JSON output support and context tracking.

    Context passed to the logging methods is attached to the log record as
    extra fields, so JSON output carries it as top-level keys.
    """

    def __init__(
        self,
        name: str = "impactlens",
        level: LogLevel = LogLevel.INFO,
        json_output: bool = False,
        log_file: Optional[Path] = None,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            level: Log level
            json_output: If True, output JSON-formatted logs
            log_file: Optional file path to write logs to
        """
        self.name = name
        self.level = level
        self.json_output = json_output
        self.log_file = log_file

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.value))
        self.logger.propagate = False
        self.logger.handlers.clear()

        formatter = _make_formatter(json_output)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, level.value))
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            self._add_file_handler(log_file, formatter)

    def _add_file_handler(self, log_file: Path, formatter: logging.Formatter) -> None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, self.level.value))
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)
        self.log_file = log_file

    def set_level(self, level: LogLevel) -> None:
        self.level = level
        self.logger.setLevel(getattr(logging, level.value))
        for handler in self.logger.handlers:
            handler.setLevel(getattr(logging, level.value))

    def set_json_output(self, json_output: bool) -> None:
        self.json_output = json_output
        formatter = _make_formatter(json_output)
        for handler in self.logger.handlers:
            handler.setFormatter(formatter)

    def _log_with_context(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        if context:
            kwargs.update(context)
        if kwargs:
            self.logger.log(level, message, extra=kwargs)
        else:
            self.logger.log(level, message)

    def debug(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log debug message."""
        self._log_with_context(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log info message."""
        self._log_with_context(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log warning message."""
        self._log_with_context(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log error message."""
        self._log_with_context(logging.ERROR, message, context, **kwargs)

    def log_llm_call(
        self,
        model: str,
        prompt: str,
        response: str,
        tokens_input: Optional[int] = None,
        tokens_output: Optional[int] = None,
        latency_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log a model call with structured metadata.

        Args:
            model: Model name
            prompt: Request text (only its length and a preview are logged)
            response: Response text (only its length and a preview are logged)
            tokens_input: Prompt tokens, when the SDK reports them
            tokens_output: Output tokens, when the SDK reports them
            latency_ms: Request latency in milliseconds
            **kwargs: Additional metadata
        """
        prompt_preview = prompt[:200] + "..." if len(prompt) > 200 else prompt
        response_preview = response[:200] + "..." if len(response) > 200 else response

        context = {
            "event_type": "llm_call",
            "model": model,
            "prompt_length": len(prompt),
            "response_length": len(response),
            "prompt_preview": prompt_preview,
            "response_preview": response_preview,
        }
        if tokens_input is not None:
            context["tokens_input"] = tokens_input
        if tokens_output is not None:
            context["tokens_output"] = tokens_output
        if latency_ms is not None:
            context["latency_ms"] = latency_ms
        context.update(kwargs)

        self.info(f"LLM call: {model}", context=context)

    def log_stage(
        self,
        stage: str,
        status: str,
        duration_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log a generation stage transition.

        Args:
            stage: Stage name (e.g., "prompt_assembly", "model_call", "validation")
            status: "started", "completed" or "failed"
            duration_ms: Stage duration in milliseconds
            **kwargs: Additional metadata
        """
        context = {"event_type": "generation_stage", "stage": stage, "status": status}
        if duration_ms is not None:
            context["duration_ms"] = duration_ms
        context.update(kwargs)

        if status == "failed":
            self.error(f"Stage {stage} failed", context=context)
        elif status == "completed":
            self.info(f"Stage {stage} completed", context=context)
        else:
            self.debug(f"Stage {stage} started", context=context)


_loggers: dict[str, StructuredLogger] = {}
_settings: dict[str, Any] = {"level": LogLevel.INFO, "json_output": False, "log_file": None}


def get_logger(name: str = "impactlens") -> StructuredLogger:
    """Get or create the structured logger for ``name`` with the current global settings."""
    if name not in _loggers:
        _loggers[name] = StructuredLogger(
            name=name,
            level=_settings["level"],
            json_output=_settings["json_output"],
            log_file=_settings["log_file"],
        )
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure global logging settings for all ImpactLens loggers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON-formatted logs
        log_file: Optional file path to write logs to
    """
    log_level = LogLevel[level.upper()]
    log_path = Path(log_file) if log_file else None
    _settings.update(level=log_level, json_output=json_output, log_file=log_path)

    for structured in _loggers.values():
        structured.set_level(log_level)
        structured.set_json_output(json_output)
        if log_path is not None and structured.log_file != log_path:
            structured._add_file_handler(log_path, _make_formatter(json_output))
