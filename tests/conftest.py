import json

import pytest

from gigalixir_deploy.failure import CommandError


def releases_json(*versions):
    return json.dumps([{"version": v} for v in versions])


def ps_json(*pods):
    return json.dumps({"pods": [{"version": v, "status": s} for v, s in pods]})


class ScriptedRunner:
    """Stands in for CommandRunner: records calls, replays scripted results.

    Results are matched by the longest argv prefix. Each result is a string
    (stdout) or an exception to raise; the last one repeats once the script
    runs out.
    """

    def __init__(self):
        self.calls = []
        self.scripts = {}
        self.secrets = []
        self.on_run = None  # called with argv before the result is replayed

    def script(self, *prefix_and_results):
        *prefix, results = prefix_and_results
        self.scripts[tuple(prefix)] = list(results)
        return self

    def fail(self, *prefix, returncode=1, stderr="boom"):
        return self.script(*prefix, [CommandError(" ".join(prefix), returncode, stderr)])

    def add_secret(self, secret):
        if secret:
            self.secrets.append(secret)

    def calls_to(self, *prefix):
        return [c for c in self.calls if c[:len(prefix)] == prefix]

    async def run(self, command, *args):
        argv = (command, *args)
        self.calls.append(argv)
        if self.on_run:
            self.on_run(argv)

        matches = [p for p in self.scripts if argv[:len(p)] == p]
        if not matches:
            return ""
        results = self.scripts[max(matches, key=len)]
        result = results.pop(0) if len(results) > 1 else results[0]
        if isinstance(result, Exception):
            raise result
        return result


class SleepRecorder:
    def __init__(self):
        self.durations = []

    async def __call__(self, seconds):
        self.durations.append(seconds)


@pytest.fixture
def runner():
    return ScriptedRunner()


@pytest.fixture
def sleeper():
    return SleepRecorder()
