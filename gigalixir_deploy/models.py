from dataclasses import dataclass, field
from enum import Enum

Release = int


class PodHealth(str, Enum):
    HEALTHY = "Healthy"


@dataclass(frozen=True)
class Pod:
    version: int
    status: str  # "Healthy", "Unhealthy" or whatever else the platform reports


@dataclass(frozen=True)
class PodStatus:
    """Snapshot of the running pods for an app at one point in time"""
    pods: tuple = ()

    @property
    def count(self):
        return len(self.pods)

    def is_healthy_for(self, release):
        # Exactly one pod, on the target release, reporting Healthy
        if self.count != 1:
            return False
        pod = self.pods[0]
        return pod.version == release and pod.status == PodHealth.HEALTHY.value


@dataclass
class RolloutAttempt:
    target_release: int
    attempt_index: int = 1
    elapsed_backoff_seconds: int = 0


class MigrationKind(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ROLLED_BACK = "rolled_back"


@dataclass
class MigrationOutcome:
    kind: MigrationKind
    prior_release: int = None  # Set when we rolled back
    reason: str = None  # Original migration error message

    @classmethod
    def succeeded(cls):
        return cls(MigrationKind.SUCCEEDED)

    @classmethod
    def failed(cls, reason):
        return cls(MigrationKind.FAILED, reason=reason)

    @classmethod
    def rolled_back(cls, prior_release, reason):
        return cls(MigrationKind.ROLLED_BACK, prior_release=prior_release, reason=reason)

    @property
    def ok(self):
        return self.kind == MigrationKind.SUCCEEDED


@dataclass
class DeploymentResult:
    """Results from a deployment run"""
    success: bool
    app: str = None
    message: str = None  # Human readable summary, or the error that failed the run
    previous_release: int = None  # Release that was live before the push
    migration_outcome: MigrationOutcome = None
    history: list = field(default_factory=list)  # One event per step
