"""Interactive operator console for the TikTok Live Analyzer."""

import asyncio
import logging

from .domain.models.capture_job import CaptureStage
from .domain.models.errors import LiveAnalyzerError
from .infrastructure.dependencies import ServiceContainer

COMMANDS = "status <user> | info <user> | record <user> | listen <user> | logs <user> | quit"

# Chat logs shown per request
RECENT_LOG_COUNT = 50


async def handle(container: ServiceContainer, command: str, username: str) -> None:
    """Run a single console command."""
    if command == "status":
        lookup = await container.get_live_status_service().check_status(username)
        result = lookup.result
        cached = " (cached)" if lookup.cached else ""
        print(f"@{result.account}: live={result.is_live} status={result.status_code} "
              f"room={result.room_id}{cached}")

    elif command == "info":
        lookup = await container.get_live_status_service().get_user_info(username)
        result = lookup.result
        print(f"@{result.account}: user_id={result.user_id} country={result.region}")

    elif command == "record":
        print("\nRecording... (runs until the broadcast ends)")
        job = await container.get_capture_service().capture(username)
        if job.stage == CaptureStage.DONE:
            print(f"Quality: {job.quality}")
            print(f"Video: {job.video_path}")
            print(f"Audio: {job.audio_path}")
        else:
            print(f"Failed during {job.failed_stage.value}: {job.error_message}")
            if job.video_path:
                print(f"Video kept: {job.video_path}")

    elif command == "listen":
        started = await container.get_comment_log_service().start_listening(username)
        print("Comment listener started" if started else "Listener already running")

    elif command == "logs":
        entries = container.get_comment_log_service().read_logs(username, limit=RECENT_LOG_COUNT)
        if not entries:
            print("No messages logged")
        for entry in entries:
            print(f"{entry.timestamp}  {entry.user}: {entry.comment}")

    else:
        print(f"Unknown command. Use: {COMMANDS}")


async def main():
    """Run the analyzer console."""
    print("TikTok Live Analyzer")
    print("--------------------")
    print(COMMANDS)

    logging.basicConfig(level=logging.WARNING)
    container = ServiceContainer()

    try:
        while True:
            # input() blocks, keep the loop free for chat listeners
            line = await asyncio.to_thread(input, "\n> ")
            parts = line.strip().split(maxsplit=1)
            if not parts:
                continue
            command = parts[0].lower()
            if command in ('quit', 'exit', 'q'):
                break
            username = parts[1] if len(parts) > 1 else ""

            try:
                await handle(container, command, username)
            except LiveAnalyzerError as e:
                print(f"\nError ({e.reason.value}): {e}")

    finally:
        # Clean up
        await container.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
