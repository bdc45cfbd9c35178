import asyncio

from .failure import RolloutTimeout
from .logger import get_logger
from .models import RolloutAttempt

MAX_ATTEMPTS = 10


def backoff_seconds(attempt_index):
    """Doubling backoff, no jitter and no cap: 2, 4, ..., 1024"""
    return 2 ** attempt_index


class RolloutMonitor:
    def __init__(self, inspector, sleep=None, max_attempts=MAX_ATTEMPTS):
        if max_attempts <= 0:
            raise ValueError("max_attempts must be > 0")
        self.inspector = inspector
        self.sleep = sleep if sleep else asyncio.sleep
        self.max_attempts = max_attempts
        self.logger = get_logger("monitor")

    async def wait_for_healthy_release(self, previous_release, app):
        """Poll until release previous_release + 1 is healthy.

        Returns the final RolloutAttempt. Raises RolloutTimeout once the
        attempt index passes max_attempts. Command and parse errors from the
        inspector propagate straight away; only a negative health check is
        retried.
        """
        attempt = RolloutAttempt(target_release=previous_release + 1)
        self.logger.info(f"Waiting for release {attempt.target_release} of {app} to become healthy")

        while True:
            if await self.inspector.is_release_healthy(attempt.target_release, app):
                self.logger.info(
                    f"Release {attempt.target_release} healthy after {attempt.attempt_index} "
                    f"attempt(s), {attempt.elapsed_backoff_seconds}s of backoff"
                )
                return attempt

            if attempt.attempt_index > self.max_attempts:
                break

            delay = backoff_seconds(attempt.attempt_index)
            self.logger.info(f"Waiting {delay} seconds...")
            await self.sleep(delay)
            attempt.elapsed_backoff_seconds += delay
            attempt.attempt_index += 1

        self.logger.error(
            f"Release {attempt.target_release} not healthy after {self.max_attempts} retries"
        )
        raise RolloutTimeout(attempt.target_release, self.max_attempts)
