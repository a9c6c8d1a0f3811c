from __future__ import annotations

import sys
from typing import Callable

from .domain import ExecutionResult, OutputLine
from .errors import LaunchError
from .infra import STDERR, stream_process


# Exit codes POSIX shells use when the command cannot be found or executed.
SHELL_NOT_EXECUTABLE = 126
SHELL_NOT_FOUND = 127

# exit code -> (reason, lowercase markers of the shell's own diagnostic)
SHELL_DIAGNOSTICS = {
    SHELL_NOT_FOUND: ("command not found", ("not found",)),
    SHELL_NOT_EXECUTABLE: ("permission denied", ("permission denied", "cannot execute")),
}

OutputCallback = Callable[[OutputLine], None]


def run_command(
    command: str,
    working_directory: str,
    on_output: OutputCallback | None = None,
) -> ExecutionResult:
    emit = on_output or print_output
    stdout_seen = False
    stderr_lines: list[str] = []

    def _on_line(stream: str, text: str) -> None:
        nonlocal stdout_seen
        if stream == STDERR:
            stderr_lines.append(text)
        else:
            stdout_seen = True
        emit(OutputLine(stream=stream, text=text))

    try:
        exit_code = stream_process(command, cwd=working_directory, on_line=_on_line)
    except OSError as exc:
        raise LaunchError(command, exc.strerror or str(exc)) from exc

    reason = shell_launch_failure(exit_code, stdout_seen, stderr_lines)
    if reason is not None:
        raise LaunchError(command, reason)

    return ExecutionResult(command=command, working_directory=working_directory, exit_code=exit_code)


def shell_launch_failure(exit_code: int, stdout_seen: bool, stderr_lines: list[str]) -> str | None:
    """Reason the shell could not start the command, or None if it ran.

    Only a 126/127 exit whose entire output is the shell's one-line
    diagnostic counts. Any other output means the command did something,
    and the exit code is an ordinary failure.
    """
    known = SHELL_DIAGNOSTICS.get(exit_code)
    if known is None or stdout_seen or len(stderr_lines) != 1:
        return None
    reason, markers = known
    diagnostic = stderr_lines[0].lower()
    if any(marker in diagnostic for marker in markers):
        return reason
    return None


def print_output(line: OutputLine) -> None:
    stream = sys.stderr if line.stream == STDERR else sys.stdout
    print(line.text, file=stream, flush=True)
