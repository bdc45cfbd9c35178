from .failure import CommandError, RollbackFailure
from .inspector import CLI
from .logger import get_logger
from .models import MigrationOutcome


def migration_args(app, migration_app_name=""):
    args = ["ps:migrate", f"--app_name={app}"]
    if migration_app_name:
        args.append(f"--migration_app_name={migration_app_name}")
    return args


def rollback_args(app, prior_release):
    return ["releases:rollback", "-a", app, "-r", str(prior_release)]


class MigrationSupervisor:
    """Runs migrations on a freshly rolled out release and rolls back if they fail"""

    def __init__(self, runner, rollback_on_failure=True):
        self.runner = runner
        self.rollback_on_failure = rollback_on_failure
        self.logger = get_logger("migrations")

    async def run_migrations_with_rollback(self, app, prior_release, migration_app_name=""):
        self.logger.info(f"Running migrations for {app}")
        try:
            await self.runner.run(CLI, *migration_args(app, migration_app_name))
        except CommandError as e:
            migration_error = e
        else:
            self.logger.info("Migrations succeeded")
            return MigrationOutcome.succeeded()

        if not self.rollback_on_failure:
            self.logger.error(f"Migration failed, leaving release in place: {migration_error}")
            return MigrationOutcome.failed(str(migration_error))

        self.logger.warning(f"Migration failed, rolling back to the previous release: {prior_release}")
        await self.rollback(app, prior_release, migration_error)
        return MigrationOutcome.rolled_back(prior_release, str(migration_error))

    async def rollback(self, app, prior_release, migration_error):
        try:
            await self.runner.run(CLI, *rollback_args(app, prior_release))
        except CommandError as e:
            self.logger.critical(f"Rollback to release {prior_release} failed: {e}")
            raise RollbackFailure(prior_release, migration_error, e) from migration_error
        self.logger.info(f"Rolled back {app} to release {prior_release}")
