import errno
import os
import shutil

import pytest

from pipex.config import PipelineConfig, parse_path
from pipex.runner import (
    RedirectError,
    open_input,
    open_output,
    report_error,
    run_pipeline,
)


@pytest.fixture
def path_dirs():
    return parse_path(os.environ)


def make_config(tmp_path, path_dirs, commands, infile=None, here_doc=False):
    return PipelineConfig(
        name="pipex",
        infile=infile if infile is not None else str(tmp_path / "in.txt"),
        outfile=str(tmp_path / "out.txt"),
        commands=list(commands),
        path_dirs=path_dirs,
        here_doc=here_doc,
    )


def test_two_commands_connected(tmp_path, path_dirs):
    (tmp_path / "in.txt").write_text("hello world\n")
    config = make_config(tmp_path, path_dirs, ["cat", "tr a-z A-Z"])
    status = run_pipeline(config, os.environ)
    assert status == 0
    assert (tmp_path / "out.txt").read_text() == "HELLO WORLD\n"


def test_output_is_truncated(tmp_path, path_dirs):
    (tmp_path / "in.txt").write_text("abc\n")
    (tmp_path / "out.txt").write_text("previous content that is long\n")
    config = make_config(tmp_path, path_dirs, ["cat", "cat"])
    run_pipeline(config, os.environ)
    assert (tmp_path / "out.txt").read_text() == "abc\n"


def test_here_doc_appends(tmp_path, path_dirs):
    (tmp_path / "out.txt").write_text("old\n")
    config = make_config(
        tmp_path, path_dirs, ["cat", "cat"], infile="EOF", here_doc=True
    )
    status = run_pipeline(config, os.environ, stdin=b"new\n")
    assert status == 0
    assert (tmp_path / "out.txt").read_text() == "old\nnew\n"


def test_missing_last_command(tmp_path, path_dirs, capsys):
    (tmp_path / "in.txt").write_text("x\n")
    config = make_config(tmp_path, path_dirs, ["cat", "nosuchcmd_pipex_zz"])
    status = run_pipeline(config, os.environ)
    assert status == 127
    err = capsys.readouterr().err
    assert "pipex: nosuchcmd_pipex_zz: command not found" in err


def test_missing_infile_still_runs_rest(tmp_path, path_dirs, capsys):
    missing = str(tmp_path / "missing.txt")
    config = make_config(tmp_path, path_dirs, ["cat", "cat"], infile=missing)
    status = run_pipeline(config, os.environ)
    assert status == 0
    assert (tmp_path / "out.txt").read_text() == ""
    err = capsys.readouterr().err
    assert f"pipex: {missing}: {os.strerror(errno.ENOENT)}" in err


def test_outfile_is_directory(tmp_path, path_dirs, capsys):
    (tmp_path / "in.txt").write_text("x\n")
    config = make_config(tmp_path, path_dirs, ["cat", "cat"])
    config.outfile = str(tmp_path)
    status = run_pipeline(config, os.environ)
    assert status == 1
    assert os.strerror(errno.EISDIR) in capsys.readouterr().err


def test_last_status_is_returned(tmp_path, path_dirs):
    (tmp_path / "in.txt").write_text("x\n")
    config = make_config(tmp_path, path_dirs, ["cat", "false"])
    assert run_pipeline(config, os.environ) == 1


def test_command_with_absolute_path(tmp_path, path_dirs):
    (tmp_path / "in.txt").write_text("abc\n")
    cat = shutil.which("cat")
    config = make_config(tmp_path, path_dirs, [cat, "cat"])
    assert run_pipeline(config, os.environ) == 0
    assert (tmp_path / "out.txt").read_text() == "abc\n"


def test_command_with_missing_slash_path(tmp_path, path_dirs, capsys):
    (tmp_path / "in.txt").write_text("abc\n")
    bogus = str(tmp_path / "nope_cmd")
    config = make_config(tmp_path, path_dirs, ["cat", bogus])
    assert run_pipeline(config, os.environ) == 127
    assert f"pipex: {bogus}: {os.strerror(errno.ENOENT)}" in capsys.readouterr().err


def test_report_error_format(capsys):
    exc = FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT))
    message = report_error("pipex", "file", exc)
    assert message == f"pipex: file: {os.strerror(errno.ENOENT)}"
    assert capsys.readouterr().err == message + "\n"


def test_open_input_here_doc_is_none(tmp_path, path_dirs):
    config = make_config(tmp_path, path_dirs, ["cat", "cat"], infile="EOF", here_doc=True)
    assert open_input(config) is None


def test_open_input_missing_raises(tmp_path, path_dirs):
    config = make_config(tmp_path, path_dirs, ["cat", "cat"])
    with pytest.raises(RedirectError) as info:
        open_input(config)
    assert isinstance(info.value.error, FileNotFoundError)
    assert info.value.subject == config.infile


def test_open_input_reads_file(tmp_path, path_dirs):
    (tmp_path / "in.txt").write_bytes(b"data")
    config = make_config(tmp_path, path_dirs, ["cat", "cat"])
    fd = open_input(config)
    try:
        assert os.read(fd, 10) == b"data"
    finally:
        os.close(fd)


def test_open_output_here_doc_appends(tmp_path, path_dirs):
    (tmp_path / "out.txt").write_bytes(b"a")
    config = make_config(tmp_path, path_dirs, ["cat", "cat"], infile="EOF", here_doc=True)
    fd = open_output(config)
    os.write(fd, b"b")
    os.close(fd)
    assert (tmp_path / "out.txt").read_bytes() == b"ab"