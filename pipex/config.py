"""Command-line parsing and the pipeline description it produces."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

HERE_DOC_KEYWORD = "here_doc"
MIN_ARGS = 5
MIN_HERE_DOC_ARGS = 6


class ParseError(Exception):
    """Raised when the command line or the environment cannot be used."""


@dataclass
class PipelineConfig:
    """Everything needed to run one pipeline.

    In here-document mode ``infile`` holds the limiter word instead of a path.
    """

    name: str
    infile: str
    outfile: str
    commands: list[str] = field(default_factory=list)
    path_dirs: list[str] = field(default_factory=list)
    here_doc: bool = False

    @property
    def limiter(self) -> str | None:
        """The here-document limiter, or None outside here-document mode."""
        return self.infile if self.here_doc else None


def split_words(text: str, sep: str) -> list[str]:
    """Split ``text`` on runs of ``sep``, dropping empty pieces."""
    return [word for word in text.split(sep) if word]


def normalise_name(arg: str) -> str:
    """Return the part of a program path after its last slash."""
    return arg.rpartition("/")[2]


def parse_path(env: Mapping[str, str]) -> list[str]:
    """Return the PATH directories from ``env``, each ending with a slash."""
    if not env:
        raise ParseError("env not found")
    if "PATH" not in env:
        raise ParseError("PATH not found")
    return [directory + "/" for directory in split_words(env["PATH"], ":")]


def parse_args(argv: Sequence[str], env: Mapping[str, str]) -> PipelineConfig:
    """Build a :class:`PipelineConfig` from the full argument vector.

    ``argv[0]`` is the program name, followed by the input file (or
    ``here_doc`` and a limiter), the commands, and the output file.
    """
    args = list(argv)
    if len(args) < MIN_ARGS:
        raise ParseError("Not enough arguments")
    name = normalise_name(args[0])
    here_doc = args[1] == HERE_DOC_KEYWORD
    if here_doc:
        if len(args) < MIN_HERE_DOC_ARGS:
            raise ParseError("Not enough arguments")
        args = args[1:]
    return PipelineConfig(
        name=name,
        infile=args[1],
        outfile=args[-1],
        commands=args[2:-1],
        path_dirs=parse_path(env),
        here_doc=here_doc,
    )