"""External process execution for PDF engines."""

import asyncio
from dataclasses import dataclass
from typing import Sequence


@dataclass
class ProcessResult:
    """Exit status and decoded output of a finished child process."""

    cmd: Sequence[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


async def run_process(cmd: Sequence[str]) -> ProcessResult:
    """
    Run a command to completion without blocking the event loop.

    There is no timeout: a hung child blocks the awaiting caller.

    Args:
        cmd: Executable followed by its arguments

    Returns:
        ProcessResult with return code and captured output

    Raises:
        FileNotFoundError: If the executable is not installed or not on PATH
    """
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()

    return ProcessResult(
        cmd=list(cmd),
        returncode=proc.returncode,
        # Replace invalid UTF-8 bytes instead of crashing
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
