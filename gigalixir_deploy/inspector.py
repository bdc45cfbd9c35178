import json

from .failure import ParseError
from .logger import get_logger
from .models import Pod, PodStatus

CLI = "gigalixir"


def _load_json(output, what):
    try:
        return json.loads(output)
    except json.JSONDecodeError as e:
        raise ParseError(f"{what} output is not valid JSON: {e}") from e


def _as_int(value, what):
    # Versions come back as numbers or numeric strings; bools are neither
    if isinstance(value, bool):
        raise ParseError(f"{what} is not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ParseError(f"{what} is not an integer: {value!r}")


def parse_current_release(output):
    """Newest release version from `gigalixir releases` JSON output"""
    releases = _load_json(output, "releases")
    if not isinstance(releases, list):
        raise ParseError("releases output is not a JSON array")
    if not releases:
        raise ParseError("releases output is empty, app has no releases")

    newest = releases[0]
    if not isinstance(newest, dict) or "version" not in newest:
        raise ParseError("newest release has no 'version' field")
    return _as_int(newest["version"], "release version")


def parse_pod_status(output):
    """PodStatus from `gigalixir ps` JSON output"""
    data = _load_json(output, "ps")
    if not isinstance(data, dict) or "pods" not in data:
        raise ParseError("ps output has no 'pods' field")
    if not isinstance(data["pods"], list):
        raise ParseError("ps 'pods' field is not an array")

    pods = []
    for i, raw in enumerate(data["pods"]):
        if not isinstance(raw, dict):
            raise ParseError(f"pod {i} is not an object")
        if "version" not in raw or "status" not in raw:
            raise ParseError(f"pod {i} is missing 'version' or 'status'")
        if not isinstance(raw["status"], str):
            raise ParseError(f"pod {i} status is not a string: {raw['status']!r}")
        pods.append(Pod(version=_as_int(raw["version"], f"pod {i} version"), status=raw["status"]))
    return PodStatus(pods=tuple(pods))


class ReleaseInspector:
    """Asks the platform what is deployed right now. Never caches."""

    def __init__(self, runner):
        self.runner = runner
        self.logger = get_logger("inspector")

    async def get_current_release(self, app):
        output = await self.runner.run(CLI, "releases", "-a", app)
        release = parse_current_release(output)
        self.logger.info(f"Current release of {app} is {release}")
        return release

    async def get_pod_status(self, app):
        output = await self.runner.run(CLI, "ps", "-a", app)
        return parse_pod_status(output)

    async def is_release_healthy(self, release, app):
        status = await self.get_pod_status(app)
        healthy = status.is_healthy_for(release)
        if not healthy:
            seen = ", ".join(f"v{p.version}:{p.status}" for p in status.pods) or "no pods"
            self.logger.info(f"Release {release} of {app} not healthy yet ({seen})")
        return healthy
