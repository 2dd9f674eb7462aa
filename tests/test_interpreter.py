import os
from pathlib import Path

import pytest

from mesh import CommandResult, Interpreter, parse
from mesh.ast import Cmd, Pipeline, StmtList, StringLit, Word
from mesh.exceptions import CommandNotFound, ExitRequest


def run(source: str, tmp_path: Path, env: dict[str, str] | None = None) -> tuple[CommandResult, str, str]:
    out_path = tmp_path / "stdout"
    err_path = tmp_path / "stderr"
    (tree,) = parse(source)
    with open(os.devnull) as stdin, open(out_path, "w") as stdout, open(err_path, "w") as stderr:
        interp = Interpreter(stdin=stdin, stdout=stdout, stderr=stderr, env=env)
        result = interp.execute(tree)
    return result, out_path.read_text(), err_path.read_text()


def test_external_command(tmp_path):
    result, out, _ = run("echo hello", tmp_path)
    assert result == CommandResult(status=0)
    assert out == "hello\n"


def test_statement_list_runs_in_order(tmp_path):
    _, out, _ = run("echo a; echo b", tmp_path)
    assert out == "a\nb\n"


def test_empty_command_is_a_no_op(tmp_path):
    interp = Interpreter()
    assert interp.execute(Cmd()) == CommandResult()
    assert interp.execute(StmtList()) == CommandResult()


def test_non_zero_exit_is_a_status_not_an_error(tmp_path):
    result, _, _ = run("false; echo still", tmp_path)
    assert result.status == 0
    result, _, _ = run("false", tmp_path)
    assert result.status == 1
    assert result.error is None


def test_missing_program(tmp_path):
    result, out, _ = run("mesh-no-such-program; echo after", tmp_path)
    assert result.status == 127
    assert isinstance(result.error, CommandNotFound)
    assert out == ""


def test_program_that_is_not_executable(tmp_path):
    result, _, _ = run(str(tmp_path), tmp_path)
    assert result.status == 126
    assert result.error is not None


def test_stderr_is_connected(tmp_path):
    _, out, err = run("sh -c 'echo oops >&2'", tmp_path)
    assert out == ""
    assert err == "oops\n"


def test_multi_line_string_argument(tmp_path):
    _, out, _ = run("echo 'bar\nbaz'", tmp_path)
    assert out == "bar\nbaz\n"


def test_variable_expansion(tmp_path):
    env = {**os.environ, "GREETING": "hi there"}
    env.pop("MESH_UNSET", None)
    _, out, _ = run("echo $GREETING x$MESH_UNSET. x/$/y", tmp_path, env=env)
    assert out == "hi there x. x/$/y\n"


def test_tilde_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", "/home/mesh")
    _, out, _ = run("echo ~ ~/Desktop x~ '~'", tmp_path)
    assert out == "/home/mesh /home/mesh/Desktop x~ ~\n"


def test_pipeline_wires_stages(tmp_path):
    result, out, _ = run("echo hello | tr a-z A-Z | cat", tmp_path)
    assert result == CommandResult(status=0)
    assert out == "HELLO\n"


def test_pipeline_stages_run_concurrently(tmp_path):
    # `yes` never stops on its own; it only ends once `head` closes the pipe.
    result, out, _ = run("yes | head -n 2", tmp_path)
    assert result.status == 0
    assert out == "y\ny\n"


@pytest.mark.parametrize(
    "source, status",
    [
        ("false | true", 0),
        ("true | false", 1),
        ("false | false | true", 0),
    ],
)
def test_pipeline_reports_last_stage_status(tmp_path, source, status):
    result, _, _ = run(source, tmp_path)
    assert result.status == status
    assert result.error is None


def test_pipeline_ignores_earlier_stage_errors(tmp_path):
    result, out, _ = run("mesh-no-such-program | echo hi", tmp_path)
    assert result == CommandResult(status=0)
    assert out == "hi\n"


def test_pipeline_reports_last_stage_error(tmp_path):
    result, _, _ = run("echo hi | mesh-no-such-program", tmp_path)
    assert result.status == 127
    assert isinstance(result.error, CommandNotFound)


def test_pipeline_closes_every_descriptor(tmp_path):
    fd_dir = Path("/proc/self/fd")
    if not fd_dir.is_dir():
        pytest.skip("needs /proc")
    run("true", tmp_path)
    before = len(list(fd_dir.iterdir()))
    run("echo a | cat | cat | mesh-no-such-program", tmp_path)
    after = len(list(fd_dir.iterdir()))
    assert before == after


def test_single_stage_pipeline(tmp_path):
    stage = Cmd((Word((StringLit("true"),)),))
    assert Interpreter().execute(Pipeline((stage,))) == CommandResult()


def test_exit_stops_the_list(tmp_path):
    result, out, _ = run("exit 2; echo no", tmp_path)
    assert result.status == 2
    assert isinstance(result.error, ExitRequest)
    assert out == ""


def test_builtin_error_stops_the_list(tmp_path):
    result, out, _ = run("exit too many; echo no", tmp_path)
    assert result.status == 1
    assert str(result.error) == "exit: too many arguments"
    assert out == ""


def test_custom_builtin_runs_in_pipeline_stages(tmp_path):
    interp = Interpreter(stdin=None)
    interp.register_builtin("count", lambda args: CommandResult(status=len(args)))
    (tree,) = parse("count a | count a b c")
    assert interp.execute(tree).status == 3
    assert "count" in interp.builtins


def test_not_a_statement():
    with pytest.raises(TypeError):
        Interpreter().execute("echo")  # type: ignore[arg-type]
