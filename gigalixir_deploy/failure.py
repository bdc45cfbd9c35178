class DeployError(RuntimeError):
    """Base class for anything that fails a deployment run"""


class CommandError(DeployError):
    def __init__(self, command, returncode, stderr=""):
        self.command = command
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"`{command}` failed with exit code {returncode}"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class ParseError(DeployError):
    pass


class RolloutTimeout(DeployError):
    def __init__(self, target_release, attempts):
        self.target_release = target_release
        self.attempts = attempts
        super().__init__(
            f"Taking too long for new release to deploy: release {target_release} "
            f"not healthy after {attempts} attempts"
        )


class MigrationFailure(DeployError):
    pass


class RollbackFailure(DeployError):
    def __init__(self, prior_release, migration_error, rollback_error):
        self.prior_release = prior_release
        self.migration_error = migration_error
        self.rollback_error = rollback_error
        super().__init__(
            f"Migration failed ({migration_error}) and rollback to release {prior_release} "
            f"also failed ({rollback_error}); the new release may still be live"
        )
