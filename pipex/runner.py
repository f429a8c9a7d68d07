"""Running a configured pipeline of commands connected by pipes."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
from collections.abc import Mapping
from typing import IO, Union

from pipex.config import PipelineConfig, split_words
from pipex.resolve import resolve_command

COMMAND_NOT_FOUND = 127
REDIRECT_FAILED = 1

StdinSource = Union[bytes, int, IO[bytes], None]


class RedirectError(Exception):
    """Raised when an input or output file cannot be opened."""

    def __init__(self, subject: str, error: OSError) -> None:
        super().__init__(f"{subject}: {error.strerror or error}")
        self.subject = subject
        self.error = error


def report_error(name: str, subject: str, exc: OSError) -> str:
    """Write ``name: subject: reason`` to standard error and return it."""
    message = f"{name}: {subject}: {exc.strerror or exc}"
    print(message, file=sys.stderr)
    return message


def open_input(config: PipelineConfig) -> int | None:
    """Open the input file for reading and return its descriptor.

    In here-document mode there is no input file and None is returned.
    """
    if config.here_doc:
        return None
    try:
        return os.open(config.infile, os.O_RDONLY)
    except OSError as exc:
        raise RedirectError(config.infile, exc) from exc


def open_output(config: PipelineConfig) -> int:
    """Open the output file for writing and return its descriptor.

    The file is truncated normally and appended to in here-document mode.
    """
    flags = os.O_WRONLY | os.O_CREAT
    flags |= os.O_APPEND if config.here_doc else os.O_TRUNC
    try:
        return os.open(config.outfile, flags, 0o644)
    except OSError as exc:
        raise RedirectError(config.outfile, exc) from exc


def _launch(
    config: PipelineConfig,
    command: str,
    env: Mapping[str, str],
    in_fd: StdinSource,
    out_fd: int,
) -> subprocess.Popen | int:
    """Start one command, or return the status it ends with if it cannot start."""
    words = split_words(command, " ")
    first = words[0] if words else ""
    program = resolve_command(first, config.path_dirs)
    if program is None:
        print(f"{config.name}: {first}: command not found", file=sys.stderr)
        return COMMAND_NOT_FOUND
    try:
        return subprocess.Popen(
            words, executable=program, stdin=in_fd, stdout=out_fd, env=dict(env)
        )
    except OSError as exc:
        report_error(config.name, program, exc)
        return COMMAND_NOT_FOUND


def _exit_status(outcome: subprocess.Popen | int) -> int:
    if isinstance(outcome, int):
        return outcome
    code = outcome.returncode
    # A command killed by a signal reports no exit code of its own.
    return code if code >= 0 else 0


def run_pipeline(
    config: PipelineConfig, env: Mapping[str, str], stdin: StdinSource = None
) -> int:
    """Run every command of ``config`` and return the last command's status.

    ``stdin`` feeds the first command in here-document mode; it may be bytes,
    a binary file, a descriptor, or None to inherit the current input.
    """
    count = len(config.commands)
    open_fds: set[int] = set()

    def release(fd: int) -> None:
        if fd in open_fds:
            open_fds.discard(fd)
            os.close(fd)

    outcomes: list[subprocess.Popen | int] = []
    with tempfile.TemporaryFile() if isinstance(stdin, bytes) else _nothing() as spool:
        if spool is not None:
            spool.write(stdin)
            spool.seek(0)
            first_stdin: StdinSource = spool
        else:
            first_stdin = stdin
        try:
            pipes: list[tuple[int, int]] = []
            for _ in range(count - 1):
                read_end, write_end = os.pipe()
                open_fds.update((read_end, write_end))
                pipes.append((read_end, write_end))

            for index, command in enumerate(config.commands):
                is_last = index == count - 1
                owned: list[int] = []
                try:
                    if index == 0:
                        in_fd = open_input(config)
                        if in_fd is None:
                            in_fd = first_stdin
                        else:
                            owned.append(in_fd)
                    else:
                        in_fd = pipes[index - 1][0]
                    if is_last:
                        out_fd = open_output(config)
                        owned.append(out_fd)
                    else:
                        out_fd = pipes[index][1]
                except RedirectError as exc:
                    report_error(config.name, exc.subject, exc.error)
                    outcomes.append(REDIRECT_FAILED)
                else:
                    outcomes.append(_launch(config, command, env, in_fd, out_fd))
                finally:
                    for fd in owned:
                        os.close(fd)
                    if index > 0:
                        release(pipes[index - 1][0])
                    if not is_last:
                        release(pipes[index][1])
        finally:
            for fd in list(open_fds):
                release(fd)
            for outcome in outcomes:
                if isinstance(outcome, subprocess.Popen):
                    outcome.wait()
    return _exit_status(outcomes[-1]) if outcomes else 0


class _nothing:
    """A context manager that yields None."""

    def __enter__(self) -> None:
        return None

    def __exit__(self, *exc_info: object) -> None:
        return None