"""Domain port for running external encoding processes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ProcessResult:
    """Outcome of a finished (or killed) child process."""
    return_code: Optional[int]
    stderr: str = ""
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.timed_out and self.return_code == 0

    @property
    def detail(self) -> str:
        """Short human readable exit detail."""
        if self.timed_out:
            return "process timed out and was killed"
        detail = f"exited with code {self.return_code}"
        tail = self.stderr.strip().splitlines()[-1:] if self.stderr else []
        if tail:
            detail = f"{detail}: {tail[0]}"
        return detail


class ProcessRunnerPort(ABC):
    """Port for running an external encoding tool to completion."""

    @abstractmethod
    async def run(self, args: List[str], timeout: Optional[float] = None) -> ProcessResult:
        """Run the tool with the given arguments and wait for it to exit.

        Args:
            args: Arguments passed to the tool (without the binary itself)
            timeout: Seconds to wait before killing the process, None waits forever

        Returns:
            Process result

        Raises:
            ProcessSpawnError: If the process could not be started
        """
        pass
