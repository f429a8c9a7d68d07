"""Command entry point: ``pipex infile cmd1 ... cmdN outfile``."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from pipex.config import ParseError, parse_args
from pipex.heredoc import read_heredoc
from pipex.runner import report_error, run_pipeline


def _read_here_doc(limiter: str) -> bytes:
    stream = getattr(sys.stdin, "buffer", None)
    if stream is not None:
        return read_heredoc(stream, os.fsencode(limiter))
    return read_heredoc(sys.stdin, limiter).encode()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the pipeline described by ``argv`` (program name first).

    Returns the exit status of the last command, or 1 on a usage error.
    """
    args = list(sys.argv if argv is None else argv)
    env = dict(os.environ)
    try:
        config = parse_args(args, env)
    except ParseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    stdin = _read_here_doc(config.infile) if config.here_doc else None
    try:
        return run_pipeline(config, env, stdin)
    except OSError as exc:
        report_error(config.name, exc.filename or "pipe", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())