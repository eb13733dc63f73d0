"""
Follow-Through Tracer

Step-by-step tracing of the grounding -> prompt -> generation -> persistence
path. Every helper is a no-op unless FOLLOW_THROUGH is enabled.
"""
import logging
from typing import Any
from datetime import datetime

from .config import settings

# Dedicated logger for follow-through tracing
tracer = logging.getLogger("followthrough")


def _preview(data: Any, max_len: int = 60) -> str:
    if data is None:
        return "<None>"
    text = str(data).replace("\n", " ")
    if len(text) > max_len:
        return f"{text[:max_len]}..."
    return text


def _emit(icon: str, step: str, module: str, detail: str = "") -> None:
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{timestamp}] {icon} [{module}] {step}"
    tracer.info(f"{line}: {detail}" if detail else line)


def trace_input(module: str, input_name: str, value: Any):
    """Log an input value entering a module."""
    if settings.follow_through:
        _emit("→", f"INPUT {input_name}", module, _preview(value))


def trace_step(module: str, description: str):
    """Log a general step in processing."""
    if settings.follow_through:
        _emit("•", "STEP", module, description)


def trace_call(module: str, function: str, args_preview: str = ""):
    """Log that a collaborator is being called."""
    if settings.follow_through:
        detail = f"calling {function}()"
        if args_preview:
            detail += f" with {args_preview}"
        _emit("▶", "CALL", module, detail)


def trace_result(module: str, function: str, success: bool, result_preview: Any = None):
    """Log the result of a collaborator call."""
    if settings.follow_through:
        detail = f"{function}() {'✓ SUCCESS' if success else '✗ FAILED'}"
        if result_preview is not None:
            detail += f" => {_preview(result_preview)}"
        _emit("◀", "RESULT", module, detail)


def trace_output(module: str, output_name: str, value: Any):
    """Log an output value leaving a module."""
    if settings.follow_through:
        _emit("←", f"OUTPUT {output_name}", module, _preview(value))


def trace_section(title: str):
    """Log a divider for a major pipeline stage."""
    if settings.follow_through:
        bar = "─" * 40
        tracer.info(bar)
        tracer.info(f"  {title.upper()}")
        tracer.info(bar)


def setup_follow_through_logging():
    """Configure the follow-through logger."""
    if not settings.follow_through:
        return
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(message)s"))

    tracer.addHandler(handler)
    tracer.setLevel(logging.INFO)
    tracer.propagate = False

    tracer.info("=" * 50)
    tracer.info("  FOLLOW-THROUGH MODE ENABLED")
    tracer.info("=" * 50)
