"""
Command Runner for Audio Setup
"""

import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Dict, Optional, Sequence
from loguru import logger

from .errors import CommandNotFoundError, CommandTimeoutError, NonZeroExitError


@dataclass(frozen=True)
class RawOutput:
    stdout: bytes
    stderr: bytes
    exit_code: int

    @property
    def text(self) -> str:
        """Stdout decoded as UTF-8, invalid bytes replaced"""
        return self.stdout.decode("utf-8", errors="replace")


class CommandRunner:
    """Runs the audio control executable with a fixed argument list.

    Arguments are always passed as a discrete argv list and never through a
    shell. Each call spawns exactly one child process and is bounded by
    ``timeout`` seconds. Nothing is retried here.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        env: Optional[Dict[str, str]] = None,
        force_c_locale: bool = True,
    ):
        if timeout <= 0:
            raise ValueError("Timeout must be positive")
        self.timeout = timeout
        self.env = dict(os.environ if env is None else env)
        if force_c_locale:
            # Labels such as "Volume:" are translated in other locales
            self.env["LC_ALL"] = "C"

    def run(self, executable: str, args: Sequence[str]) -> RawOutput:
        argv = [executable, *args]
        logger.debug(f"Running: {argv}")

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                timeout=self.timeout,
                env=self.env,
                shell=False,
            )
        except FileNotFoundError as e:
            logger.error(f"{executable} not found in PATH")
            raise CommandNotFoundError(executable) from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"{executable} {args[0] if args else ''} timed out")
            raise CommandTimeoutError(self.timeout) from e

        output = RawOutput(
            stdout=result.stdout or b"",
            stderr=result.stderr or b"",
            exit_code=result.returncode,
        )
        logger.debug(
            f"{executable} return code: {output.exit_code}, {len(output.stdout)} bytes"
        )

        if output.exit_code != 0:
            stderr = output.stderr.decode("utf-8", errors="replace")
            logger.debug(f"stderr: {stderr.strip()}")
            raise NonZeroExitError(output.exit_code, stderr)

        return output

    @staticmethod
    def which(executable: str) -> Optional[str]:
        """Resolve an executable on PATH, None if it is missing"""
        return shutil.which(executable)
