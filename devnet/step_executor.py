# devnet/step_executor.py
# -*- coding: utf-8 -*-
"""
Provides functionality to execute individual bootstrap steps.

`announced` wraps one step with a console announcement before it runs and a
completion line with its elapsed time after it succeeds. A failing step is
not intercepted: the exception object raised by the step reaches the caller
unchanged and no completion line is printed.
"""

import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import click

module_logger = logging.getLogger(__name__)

Echo = Callable[[str], None]


class StepStatus(str, enum.Enum):
    SUCCEEDED = "succeeded"
    PENDING = "pending"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one announced step."""

    label: str
    status: StepStatus
    duration_ms: float
    value: Any = None

    @property
    def succeeded(self) -> bool:
        return self.status is StepStatus.SUCCEEDED


def format_announcement(label: str) -> str:
    # Two extra dashes cover the "> " marker.
    separator = "-" * (len(label) + 2)
    marker = click.style(">", fg="yellow", bold=True)
    return f"\n{separator}\n{marker} {click.style(label, fg='yellow')}"


def format_completion(label: str, duration_ms: float) -> str:
    success_line = f"{click.style('✔', fg='green')} {label} done"
    timestamp_line = click.style(f"({duration_ms:.0f}ms)", fg="bright_black")
    return f"{success_line} {timestamp_line}"


def announced(
    label: str,
    step_function: Callable[[], Any],
    echo: Optional[Echo] = None,
    current_logger: Optional[logging.Logger] = None,
) -> StepResult:
    """
    Execute a single bootstrap step with console announcements.

    Args:
        label: Human-readable description printed before and after the step.
        step_function: Zero-argument callable performing the step.
        echo: Output function for the console lines. Defaults to `click.echo`.
        current_logger: The logger instance to use.

    Returns:
        A `StepResult` with status `SUCCEEDED`, the elapsed wall-clock time in
        milliseconds and the value returned by `step_function`.

    Raises:
        Whatever `step_function` raises, unchanged.
    """
    logger_to_use = current_logger if current_logger else module_logger
    output = echo if echo else click.echo

    output(format_announcement(label))
    started = time.monotonic()
    value = step_function()
    duration_ms = max(0.0, (time.monotonic() - started) * 1000)
    output(format_completion(label, duration_ms))

    logger_to_use.debug(f"Step '{label}' finished in {duration_ms:.0f}ms")
    return StepResult(
        label=label,
        status=StepStatus.SUCCEEDED,
        duration_ms=duration_ms,
        value=value,
    )


def pending(
    label: str,
    echo: Optional[Echo] = None,
    current_logger: Optional[logging.Logger] = None,
) -> StepResult:
    """Report a placeholder step that has nothing to execute yet."""
    logger_to_use = current_logger if current_logger else module_logger
    output = echo if echo else click.echo
    output(format_announcement(label))
    output(f"{click.style('…', fg='yellow')} {label} is not implemented yet")
    logger_to_use.warning(f"Step '{label}' is a placeholder; nothing was executed.")
    return StepResult(label=label, status=StepStatus.PENDING, duration_ms=0.0)
