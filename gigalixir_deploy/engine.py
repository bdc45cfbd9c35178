from .failure import DeployError, MigrationFailure
from .inspector import CLI, ReleaseInspector
from .logger import get_logger
from .migrations import MigrationSupervisor
from .models import DeploymentResult
from .monitor import RolloutMonitor
from .runner import CommandRunner

REMOTE = "gigalixir"
TARGET_REF = "refs/heads/master"
HOT_RELEASE_HEADER = "http.extraheader=GIGALIXIR-HOT: true"


def push_args(ref="HEAD", hot_release=False):
    """git arguments that force-push ref to the platform remote"""
    args = []
    if hot_release:
        args += ["-c", HOT_RELEASE_HEADER]
    args += ["push", "-f", REMOTE, f"{ref}:{TARGET_REF}"]
    return args


class DeploymentEngine:
    def __init__(self, runner=None, sleep=None):
        self.runner = runner if runner else CommandRunner()
        self.inspector = ReleaseInspector(self.runner)
        self.monitor = RolloutMonitor(self.inspector, sleep=sleep)
        self.supervisor = MigrationSupervisor(self.runner)
        self.logger = get_logger("engine")

    def _step(self, result, event, title, **details):
        self.logger.info(f"==> {title}")
        result.history.append({"event": event, **details})

    async def _install_client(self):
        await self.runner.run("pip", "install", "gigalixir", "--ignore-installed", "six")

    async def _login(self, config):
        await self.runner.run(
            CLI, "login",
            "-e", config.gigalixir_username,
            "-y",
            "-p", config.gigalixir_password.get_secret_value(),
        )

    async def _resolve_push_ref(self, config):
        if not config.app_subfolder:
            return "HEAD"
        output = await self.runner.run("git", "subtree", "split", "--prefix", config.app_subfolder, "HEAD")
        lines = output.strip().splitlines()
        if not lines:
            raise DeployError(f"git subtree split printed no commit for {config.app_subfolder}")
        return lines[-1].strip()

    async def _push(self, config):
        ref = await self._resolve_push_ref(config)
        if config.hot_release:
            self.logger.info("Hot release requested")
        await self.runner.run("git", *push_args(ref, config.hot_release))

    async def _migrate(self, config, result, previous_release):
        self._step(result, "add_private_key", "Adding private key to gigalixir")
        await self.runner.run(config.ssh_key_helper, config.ssh_private_key.get_secret_value())

        self._step(result, "wait_for_release", "Waiting for new release to deploy", previous_release=previous_release)
        attempt = await self.monitor.wait_for_healthy_release(previous_release, config.gigalixir_app)
        result.history.append({
            "event": "release_healthy",
            "release": attempt.target_release,
            "attempts": attempt.attempt_index,
        })

        self._step(result, "migrate", "Running migrations")
        outcome = await self.supervisor.run_migrations_with_rollback(
            config.gigalixir_app, previous_release, config.migration_app_name
        )
        result.migration_outcome = outcome
        result.history.append({"event": "migrations_finished", "outcome": outcome.kind.value})
        if not outcome.ok:
            raise MigrationFailure(outcome.reason)

    async def deploy(self, config):
        """Push the app, then optionally wait for it and migrate"""
        for secret in config.secrets():
            self.runner.add_secret(secret)

        app = config.gigalixir_app
        result = DeploymentResult(success=False, app=app)
        self.logger.info(f"Starting deployment of {app} (migrations={config.migrations})")

        try:
            if config.install_client:
                self._step(result, "install_client", "Installing gigalixir")
                await self._install_client()

            self._step(result, "login", "Logging in to gigalixir")
            await self._login(config)

            self._step(result, "git_remote", "Setting git remote for gigalixir")
            await self.runner.run(CLI, "git:remote", app)

            self._step(result, "current_release", "Getting current release")
            previous_release = await self.inspector.get_current_release(app)
            result.previous_release = previous_release
            self.logger.info(f"The current release is {previous_release}")

            self._step(result, "push", "Deploying to gigalixir", hot_release=config.hot_release)
            await self._push(config)

            if config.migrations:
                await self._migrate(config, result, previous_release)

        except DeployError as e:
            result.message = str(e)
            result.history.append({"event": "failed", "error_type": type(e).__name__, "error": str(e)})
            self.logger.error(f"DEPLOYMENT FAILED: {e}")
            return result

        result.success = True
        result.message = f"Deployed {app}"
        self.logger.info(f"SUCCESS: {result.message}")
        return result
