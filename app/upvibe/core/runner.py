"""Process runner for install commands and post-install hooks.

Commands run through the shell one at a time. Nothing is retried; the
first failure is returned to the caller as a ProcessError.
"""

import logging

from upvibe.utils.shell import run_shell

logger = logging.getLogger(__name__)

# Exit status reported when the shell itself could not be started
SHELL_LAUNCH_FAILURE = 127


class ProcessError(Exception):
    """Raised when an external command exits with a non-zero status.

    Attributes:
        command: The command line that failed.
        returncode: Exit status of the command.
        stderr: Captured standard error, stripped.
    """

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(self.first_line)

    @property
    def first_line(self) -> str:
        """First line of the diagnostic output, used as user-facing message."""
        if self.stderr:
            return self.stderr.splitlines()[0].strip()
        return f"Command failed with exit code {self.returncode}"


class ProcessRunner:
    """Runs shell commands, capturing stderr and discarding stdout.

    Attributes:
        env: Extra environment variables applied to every command.
    """

    def __init__(self, env: dict[str, str] | None = None) -> None:
        self.env = dict(env or {})

    def run(self, command: str, env: dict[str, str] | None = None) -> None:
        """Run a single command.

        Args:
            command: Command line to execute through the shell.
            env: Extra environment variables for this command.

        Raises:
            ProcessError: If the command exits non-zero or cannot start.
        """
        logger.debug("Running: %s", command)
        try:
            result = run_shell(command, env={**self.env, **(env or {})})
        except OSError as e:
            raise ProcessError(command, SHELL_LAUNCH_FAILURE, str(e)) from e

        if not result.success:
            logger.debug(
                "Command exited with %d: %s\n%s",
                result.returncode,
                command,
                result.stderr.strip(),
            )
            raise ProcessError(command, result.returncode, result.stderr)

    def run_sequence(
        self,
        commands: list[str] | tuple[str, ...],
        env: dict[str, str] | None = None,
    ) -> None:
        """Run commands in order, stopping at the first failure.

        Args:
            commands: Command lines to execute.
            env: Extra environment variables for every command.

        Raises:
            ProcessError: For the first command that fails; later
                commands are not run.
        """
        for command in commands:
            self.run(command, env=env)
