import asyncio
import os
import shlex

from .failure import CommandError
from .logger import get_logger, mask


class CommandRunner:
    """Runs external commands one at a time and hands back their stdout"""

    def __init__(self, cwd=None, env=None, secrets=()):
        self.cwd = cwd
        self.env = env
        self.secrets = [s for s in secrets if s]
        self.logger = get_logger("runner")

    def add_secret(self, secret):
        if secret and secret not in self.secrets:
            self.secrets.append(secret)

    def _display(self, command, args):
        # Mask before quoting, quoting can split a secret apart
        return shlex.join(mask(part, self.secrets) for part in (command, *args))

    async def run(self, command, *args):
        """Run command with args, return decoded stdout or raise CommandError"""
        display = self._display(command, args)
        self.logger.info(f"$ {display}")

        env = None
        if self.env:
            env = {**os.environ, **self.env}

        try:
            process = await asyncio.create_subprocess_exec(
                command,
                *args,
                cwd=self.cwd,
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CommandError(display, 127, mask(str(e), self.secrets)) from e

        stdout, stderr = await process.communicate()
        output = stdout.decode("utf-8", errors="replace")

        if process.returncode != 0:
            error_text = mask(stderr.decode("utf-8", errors="replace"), self.secrets)
            self.logger.error(f"Command exited with {process.returncode}: {display}")
            raise CommandError(display, process.returncode, error_text)

        self.logger.debug(f"Command succeeded, {len(output)} bytes of output")
        return output
