"""Domain service capturing a live broadcast to video and audio files."""

import logging
import os
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional

from ..models.account import filename_component, normalize_account
from ..models.capture_job import CaptureJob, CaptureStage
from ..models.errors import (
    FailureReason,
    ProcessSpawnError,
    UpstreamUnavailableError,
)
from ..models.live_status import LIVE_STATUS_CODE
from ..ports.page_fetcher import PageFetcherPort
from ..ports.process_runner import ProcessRunnerPort
from .quality_selector import select_stream
from .state_extraction import (
    DEFAULT_STATE_SCRIPT_ID,
    find_state_script,
    parse_state_blob,
    parse_stream_manifest,
    resolve_status,
    resolve_stream_manifest_raw,
)

logger = logging.getLogger(__name__)


def download_args(stream_url: str, video_path: str) -> List[str]:
    """Copy the remote stream verbatim into a local container file."""
    return ['-y', '-i', stream_url, '-c', 'copy', video_path]


def extract_audio_args(video_path: str, audio_path: str) -> List[str]:
    """Extract a 16-bit PCM stereo 44.1kHz track from a container file."""
    return [
        '-y', '-i', video_path,
        '-vn',
        '-acodec', 'pcm_s16le',
        '-ar', '44100',
        '-ac', '2',
        audio_path,
    ]


@dataclass
class CaptureRun:
    """A job plus the transient data handed from one stage to the next."""
    job: CaptureJob
    markup: Optional[str] = None
    manifest: Optional[Dict[str, Any]] = None


class CaptureService:
    """Drives the capture state machine.

    ``PREPARING -> FETCHING -> RESOLVING -> SELECTING_QUALITY -> DOWNLOADING ->
    EXTRACTING_AUDIO -> DONE``, with ``FAILED`` reachable from every
    non-terminal stage. Each stage has its own transition coroutine. Jobs
    for the same account run independently; their output paths differ by
    start timestamp.
    """

    def __init__(
        self,
        page_fetcher: PageFetcherPort,
        process_runner: ProcessRunnerPort,
        recordings_dir: str,
        audio_dir: str,
        video_extension: str = "mp4",
        audio_extension: str = "wav",
        process_timeout: Optional[float] = None,
        state_script_id: str = DEFAULT_STATE_SCRIPT_ID,
        job_history_size: int = 100,
        clock_ms: Callable[[], int] = lambda: int(time.time() * 1000),
    ):
        """Initialize service.

        Args:
            page_fetcher: Upstream page fetcher
            process_runner: External encoding tool runner
            recordings_dir: Directory for video files
            audio_dir: Directory for audio files
            video_extension: Container file extension
            audio_extension: Audio file extension
            process_timeout: Per-stage timeout in seconds, None waits forever
            state_script_id: Element id of the embedded state script
            job_history_size: Jobs kept for listing
            clock_ms: Unix time source in milliseconds
        """
        self._fetcher = page_fetcher
        self._runner = process_runner
        self._recordings_dir = recordings_dir
        self._audio_dir = audio_dir
        self._video_extension = video_extension
        self._audio_extension = audio_extension
        self._process_timeout = process_timeout
        self._state_script_id = state_script_id
        self._clock_ms = clock_ms
        self._history: Deque[CaptureJob] = deque(maxlen=job_history_size)

        self._transitions: Dict[CaptureStage, Callable[[CaptureRun], Awaitable[None]]] = {
            CaptureStage.PREPARING: self._prepare,
            CaptureStage.FETCHING: self._fetch,
            CaptureStage.RESOLVING: self._resolve,
            CaptureStage.SELECTING_QUALITY: self._select_quality,
            CaptureStage.DOWNLOADING: self._download,
            CaptureStage.EXTRACTING_AUDIO: self._extract_audio,
        }

    def create_job(self, username: str) -> CaptureJob:
        """Create a job with its deterministic output paths.

        Raises:
            InvalidAccountError: If the username is empty
        """
        account = normalize_account(username)
        started_at = self._clock_ms()
        stem = f"{filename_component(account)}_{started_at}"
        return CaptureJob(
            account=account,
            started_at=started_at,
            planned_video_path=os.path.join(self._recordings_dir, f"{stem}.{self._video_extension}"),
            planned_audio_path=os.path.join(self._audio_dir, f"{stem}.{self._audio_extension}"),
        )

    async def capture(self, username: str) -> CaptureJob:
        """Capture an account's broadcast to completion or failure.

        Args:
            username: Account handle, with or without a leading ``@``

        Returns:
            Terminal capture job (Done or Failed)

        Raises:
            InvalidAccountError: If the username is empty
        """
        job = self.create_job(username)
        logger.info(f"🔴 Starting capture for @{job.account} ({job.started_at})")
        self._history.append(job)

        await self.run(CaptureRun(job=job))

        if job.stage == CaptureStage.DONE:
            logger.info(f"✅ Capture complete for @{job.account}: {job.video_path}, {job.audio_path}")
        else:
            self._collect_leftovers(job)
            logger.error(
                f"❌ Capture for @{job.account} failed in {job.failed_stage.value}: "
                f"{job.failure_reason.value} - {job.error_message}"
            )
        return job

    async def run(self, run: CaptureRun) -> CaptureJob:
        """Step a job through its transitions until it is terminal."""
        while not run.job.is_terminal:
            await self._transitions[run.job.stage](run)
        return run.job

    def recent_jobs(self) -> List[CaptureJob]:
        """Jobs started by this service, oldest first."""
        return list(self._history)

    async def _prepare(self, run: CaptureRun) -> None:
        job = run.job
        for directory in (self._recordings_dir, self._audio_dir):
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as e:
                job.mark_failed(
                    FailureReason.FILESYSTEM_FAILURE,
                    f"Could not create directory {directory}: {e}",
                )
                return
        job.advance(CaptureStage.FETCHING)

    async def _fetch(self, run: CaptureRun) -> None:
        job = run.job
        try:
            page = await self._fetcher.fetch_live_page(job.account)
        except UpstreamUnavailableError as e:
            job.mark_failed(FailureReason.UPSTREAM_UNAVAILABLE, str(e), upstream_status=e.status_code)
            return

        if not page.is_success:
            job.mark_failed(
                FailureReason.UPSTREAM_UNAVAILABLE,
                f"Upstream fetch failed: TikTok HTTP {page.status_code}",
                upstream_status=page.status_code,
            )
            return

        run.markup = page.text
        job.advance(CaptureStage.RESOLVING)

    async def _resolve(self, run: CaptureRun) -> None:
        job = run.job
        script = find_state_script(run.markup or "", self._state_script_id)
        run.markup = None
        if script is None:
            job.mark_failed(FailureReason.NO_LIVE_ROOM, "State document missing - account is not live")
            return

        document = parse_state_blob(script)
        if document is None:
            job.mark_failed(FailureReason.MANIFEST_UNAVAILABLE, "Failed to parse state document")
            return

        raw = resolve_stream_manifest_raw(document)
        if raw is None:
            if resolve_status(document).status_code == LIVE_STATUS_CODE:
                job.mark_failed(FailureReason.MANIFEST_UNAVAILABLE, "Account is live but no stream data found")
            else:
                job.mark_failed(FailureReason.NO_LIVE_ROOM, "No stream data found - account is not live")
            return

        manifest = parse_stream_manifest(raw)
        if manifest is None:
            job.mark_failed(FailureReason.MANIFEST_UNAVAILABLE, "Failed to parse stream data")
            return

        run.manifest = manifest
        job.advance(CaptureStage.SELECTING_QUALITY)

    async def _select_quality(self, run: CaptureRun) -> None:
        job = run.job
        selection = select_stream(run.manifest)
        run.manifest = None
        if selection is None:
            job.mark_failed(FailureReason.NO_STREAM_VARIANT, "No FLV stream available")
            return

        job.quality = selection.tier
        job.stream_url = selection.url
        logger.info(f"📺 Selected {selection.tier} stream for @{job.account}")
        job.advance(CaptureStage.DOWNLOADING)

    async def _download(self, run: CaptureRun) -> None:
        job = run.job
        logger.info(f"⬇️ Downloading @{job.account} to {job.planned_video_path}")
        args = download_args(job.stream_url, job.planned_video_path)
        if not await self._run_stage(job, args, "Download"):
            return
        job.video_path = job.planned_video_path
        job.advance(CaptureStage.EXTRACTING_AUDIO)

    async def _extract_audio(self, run: CaptureRun) -> None:
        job = run.job
        logger.info(f"🎵 Extracting audio to {job.planned_audio_path}")
        args = extract_audio_args(job.video_path, job.planned_audio_path)
        if not await self._run_stage(job, args, "Audio extraction"):
            # Video stays on disk, the job reports a partial capture
            return
        job.audio_path = job.planned_audio_path
        job.advance(CaptureStage.DONE)

    async def _run_stage(self, job: CaptureJob, args: List[str], label: str) -> bool:
        """Run one external process, failing the job unless it exits 0."""
        try:
            result = await self._runner.run(args, timeout=self._process_timeout)
        except ProcessSpawnError as e:
            job.mark_failed(FailureReason.PROCESS_FAILURE, f"{label} failed: {e}")
            return False

        if result.timed_out:
            job.mark_failed(
                FailureReason.PROCESS_TIMEOUT,
                f"{label} failed: {result.detail}",
                exit_code=result.return_code,
            )
            return False
        if not result.succeeded:
            job.mark_failed(
                FailureReason.PROCESS_FAILURE,
                f"{label} failed: ffmpeg {result.detail}",
                exit_code=result.return_code,
            )
            return False
        return True

    @staticmethod
    def _collect_leftovers(job: CaptureJob) -> None:
        job.leftover_files = [
            path for path in (job.planned_video_path, job.planned_audio_path)
            if os.path.exists(path)
        ]
        if job.leftover_files:
            logger.warning(f"⚠️ Capture for @{job.account} left files on disk: {job.leftover_files}")
