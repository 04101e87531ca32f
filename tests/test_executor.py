import asyncio
from datetime import date

import pytest

from dazibao.common.exceptions import ExecutionError
from dazibao.services.polling import CommandExecutor


def run(command, **kwargs):
    return asyncio.run(CommandExecutor(**kwargs).execute(command))


def test_echo_output_is_trimmed():
    assert run("echo hi") == "hi"


def test_stderr_is_merged():
    assert run("echo out; echo err 1>&2") == "out\nerr"


def test_nonzero_exit_raises():
    with pytest.raises(ExecutionError) as exc_info:
        run("false")
    assert str(exc_info.value) == "exit status 1"
    assert exc_info.value.exit_code == 1


def test_failed_command_keeps_output():
    with pytest.raises(ExecutionError) as exc_info:
        run("echo partial; exit 3")
    assert exc_info.value.exit_code == 3
    assert exc_info.value.output == "partial"


def test_variable_reference_does_not_spawn_shell():
    # A shell that does not exist proves no process is started
    assert run("%date", shell="/nonexistent/shell") == date.today().strftime("%Y-%m-%d")


def test_lone_sentinel_runs_as_shell_command():
    with pytest.raises(ExecutionError):
        run("%")


def test_missing_shell_raises():
    with pytest.raises(ExecutionError):
        run("echo hi", shell="/nonexistent/shell")


def test_embedded_nul_byte_raises_execution_error():
    with pytest.raises(ExecutionError) as exc_info:
        run("echo a\x00b")
    assert "null byte" in str(exc_info.value)
