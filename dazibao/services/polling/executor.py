"""
Command Executor

Runs one command string: either a %variable reference, resolved in
process, or a shell command line run through `<shell> -c` with stderr
merged into stdout.
"""

import asyncio

from dazibao.common.config import is_variable_reference
from dazibao.common.exceptions import ExecutionError
from dazibao.common.logging_setup import get_service_logger

from .variables import VariableResolver

logger = get_service_logger("polling.executor")


class CommandExecutor:
    """Executes block commands and built-in variable references"""

    def __init__(self, resolver: VariableResolver | None = None, shell: str = "bash"):
        self.resolver = resolver or VariableResolver()
        self.shell = shell

    async def execute(self, command: str) -> str:
        """
        Execute a command string.

        The shell runs as a child process; only the awaiting block waits
        for it, the event loop keeps serving other blocks and requests.
        An in-flight command is never killed.

        Args:
            command: Shell command line, or "%name" for a built-in variable

        Returns:
            Trimmed combined output (or the resolved variable value)

        Raises:
            ExecutionError: If the command exits non-zero or cannot be spawned
        """
        if is_variable_reference(command):
            return self.resolver.resolve(command[1:])

        try:
            process = await asyncio.create_subprocess_exec(
                self.shell, "-c", command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except (OSError, ValueError) as e:
            # ValueError: argv the OS cannot take, e.g. an embedded NUL byte
            raise ExecutionError(str(e), command=command) from e

        stdout, _ = await process.communicate()
        output = stdout.decode("utf-8", errors="replace").strip()

        if process.returncode != 0:
            logger.debug(
                f"Command exited with status {process.returncode}: {command}",
                extra={"exit_code": process.returncode},
            )
            raise ExecutionError(
                f"exit status {process.returncode}",
                command=command,
                exit_code=process.returncode,
                output=output,
            )

        return output
