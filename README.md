# pipex

`pipex` runs a chain of commands connected by pipes. The first command reads
from an input file and the last one writes to an output file. The shell line

    < infile cmd1 | cmd2 | cmd3 > outfile

is written as

    pipex infile "cmd1" "cmd2" "cmd3" outfile

The same command can be started with `python -m pipex.cli`.

## Usage

    pipex INFILE CMD1 CMD2 [CMD...] OUTFILE
    pipex here_doc LIMITER CMD1 CMD2 [CMD...] OUTFILE

- At least two commands are needed.
- Each command is split on spaces into a program name and its arguments;
  runs of spaces count as one.
- A program name that contains `/` is used as given. Any other name is looked
  up, in order, in the directories listed in `PATH`; the first entry that
  exists and is executable is used.
- All commands are started before any of them is waited for.
- The output file is truncated, or created with mode `0644` (less the umask).

### Here-documents

With `here_doc` as the first argument, the input comes from standard input
rather than a file. Reading stops at the first line that starts with
`LIMITER`, or at end of input; the limiting line is not passed on. The output
file is then appended to instead of truncated, as with
`<< LIMITER cmd1 | cmd2 >> outfile`.

    pipex here_doc EOF "cat" "wc -l" counts.txt

## Exit status

The exit status is the status of the last command in the chain:

- 127 if that command cannot be found or cannot be started;
- 1 if the output file (or, for a one-stage failure at the start, the input
  file of that command) cannot be opened;
- 0 if the command was killed by a signal;
- otherwise the command's own exit code.

If there are too few arguments, the environment is empty, or `PATH` is not
set, nothing is run and the status is 1.

Errors go to standard error. Usage problems are reported as
`Error: Not enough arguments`, `Error: env not found` or
`Error: PATH not found`. Problems with a command or a file are prefixed with
the program name:

    pipex: nosuchcmd: command not found
    pipex: missing.txt: No such file or directory

## What it does not do

There is no quoting, escaping, globbing, variable expansion or other shell
syntax inside a command: a command is only split on spaces. Only one input
and one output redirection are supported, at the ends of the chain.

## Using it from Python

```python
import os

from pipex.config import parse_args
from pipex.runner import run_pipeline

config = parse_args(["pipex", "in.txt", "grep a", "wc -l", "out.txt"], os.environ)
status = run_pipeline(config, os.environ)
```

- `pipex.config`: `parse_args(argv, env)` returns a `PipelineConfig` (fields
  `name`, `infile`, `outfile`, `commands`, `path_dirs`, `here_doc`, and the
  `limiter` property) or raises `ParseError`. Also `parse_path`,
  `normalise_name` and `split_words`.
- `pipex.resolve`: `resolve_command(name, path_dirs)` returns the path to run,
  or `None`.
- `pipex.heredoc`: `iter_lines(stream)` and `read_heredoc(stream, limiter)`
  for text or binary streams.
- `pipex.runner`: `run_pipeline(config, env, stdin=None)` runs the chain and
  returns the exit status. In here-document mode `stdin` feeds the first
  command and may be bytes, a binary file, a file descriptor, or `None` to
  inherit standard input. `open_input`, `open_output` (raising
  `RedirectError`) and `report_error` are also available.
- `pipex.cli`: `main(argv=None)` is the command above and returns its status.

### printf

`pipex.printf` provides `sprintf(fmt, *args)`, which returns the formatted
text, and `printf(fmt, *args)`, which writes it to standard output and returns
its length. The conversions are `%c %s %p %d %i %u %x %X %%`, with the
`# 0+-` flags, field width and precision. Integers wrap as 32-bit values and
pointers as 64-bit values; `%s` of `None` gives `(null)` and `%p` of zero or
`None` gives `(nil)`. `parse_format(fmt)` splits a format into literal text
and `FormatSpec` items. An invalid conversion or too few arguments raises
`FormatError`; extra arguments are ignored.