"""Shell command execution for dynamic messages and shell conditions.

Commands run through the platform shell with the calendar variables
injected into the child environment. Nothing here raises: a command that
cannot be spawned, fails without output, or prints undecodable bytes simply
produces no text (or a False condition).

There is no timeout. A command that never exits blocks the resolution.
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
from datetime import date

from occasion.domain.models import Command, Weekday
from occasion.domain.timespec import calendar_variables

logger = logging.getLogger(__name__)


def platform_shell(system: str | None = None) -> tuple[str, tuple[str, ...]]:
    """Return ``(shell, default_flags)`` for *system* (default: this host)."""
    if (system or platform.system()) == "Windows":
        return "cmd.exe", ("/C",)
    return "sh", ("-c",)


def build_argv(command: Command) -> list[str]:
    """``[shell, *flags, run]`` with platform defaults for unset parts."""
    default_shell, default_flags = platform_shell()
    shell = command.shell or default_shell
    flags = command.shell_flags if command.shell_flags is not None else default_flags
    return [shell, *flags, command.run]


def build_env(now: date, week_start_day: Weekday) -> dict[str, str]:
    """Current environment plus the calendar variables as strings."""
    env = dict(os.environ)
    env["DAY_OF_WEEK"] = Weekday.of(now).value
    for name, value in calendar_variables(now, week_start_day).items():
        env[name] = str(value)
    return env


def _spawn(
    command: Command,
    now: date,
    week_start_day: Weekday,
    *,
    capture: bool,
) -> subprocess.CompletedProcess[bytes] | None:
    argv = build_argv(command)
    output = subprocess.PIPE if capture else subprocess.DEVNULL
    try:
        return subprocess.run(
            argv,
            env=build_env(now, week_start_day),
            stdin=subprocess.DEVNULL,
            stdout=output,
            stderr=output,
            check=False,
        )
    except (OSError, ValueError) as exc:
        logger.debug("Cannot spawn %s: %s", argv[0], exc)
        return None


def run_command(command: Command, now: date, week_start_day: Weekday) -> str | None:
    """Run *command* and return its stdout, minus one trailing newline.

    Returns None on spawn failure, on a failing exit with empty output, and
    on output that is not valid UTF-8.
    """
    proc = _spawn(command, now, week_start_day, capture=True)
    if proc is None:
        return None
    if proc.returncode != 0 and not proc.stdout:
        logger.debug("Command %r exited %d with no output", command.run, proc.returncode)
        return None
    try:
        text = proc.stdout.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Command %r produced non-UTF-8 output", command.run)
        return None
    return text.removesuffix("\n")


def command_succeeds(command: Command, now: date, week_start_day: Weekday) -> bool:
    """Run *command* for its exit status only; output is discarded."""
    proc = _spawn(command, now, week_start_day, capture=False)
    return proc is not None and proc.returncode == 0
