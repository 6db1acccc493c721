"""ffmpeg process runner implementing ProcessRunnerPort."""

import asyncio
import logging
from typing import List, Optional

from ...domain.models.errors import ProcessSpawnError
from ...domain.ports.process_runner import ProcessResult, ProcessRunnerPort

logger = logging.getLogger(__name__)


class FFmpegProcessRunner(ProcessRunnerPort):
    """Runs ffmpeg as an owned child process and waits for it to exit."""

    def __init__(self, binary: str = "ffmpeg"):
        self._binary = binary

    @property
    def binary(self) -> str:
        return self._binary

    async def run(self, args: List[str], timeout: Optional[float] = None) -> ProcessResult:
        cmd = [self._binary, *args]
        logger.debug(f"🎬 Running: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise ProcessSpawnError(f"{self._binary} not found. Please install ffmpeg")
        except OSError as e:
            raise ProcessSpawnError(f"Failed to start {self._binary}: {e}")

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"⏰ {self._binary} exceeded {timeout}s, killing process {process.pid}")
            self._kill(process)
            _, stderr = await process.communicate()
            return ProcessResult(
                return_code=process.returncode,
                stderr=stderr.decode(errors="replace") if stderr else "",
                timed_out=True,
            )
        except asyncio.CancelledError:
            logger.warning(f"🛑 {self._binary} cancelled, killing process {process.pid}")
            self._kill(process)
            raise

        result = ProcessResult(
            return_code=process.returncode,
            stderr=stderr.decode(errors="replace") if stderr else "",
        )
        if not result.succeeded:
            logger.error(f"💥 {self._binary} {result.detail}")
        return result

    @staticmethod
    def _kill(process: asyncio.subprocess.Process) -> None:
        try:
            process.kill()
        except ProcessLookupError:
            # Already exited
            pass
