from .models import (
    Release, PodHealth, Pod, PodStatus, RolloutAttempt,
    MigrationKind, MigrationOutcome, DeploymentResult
)
from .failure import (
    DeployError, CommandError, ParseError, RolloutTimeout,
    MigrationFailure, RollbackFailure
)
from .runner import CommandRunner
from .inspector import ReleaseInspector
from .monitor import RolloutMonitor
from .migrations import MigrationSupervisor
from .engine import DeploymentEngine
from .config import DeployConfig, load_config

__all__ = [
    "Release", "PodHealth", "Pod", "PodStatus", "RolloutAttempt",
    "MigrationKind", "MigrationOutcome", "DeploymentResult",
    "DeployError", "CommandError", "ParseError", "RolloutTimeout",
    "MigrationFailure", "RollbackFailure",
    "CommandRunner", "ReleaseInspector", "RolloutMonitor",
    "MigrationSupervisor", "DeploymentEngine",
    "DeployConfig", "load_config",
]
