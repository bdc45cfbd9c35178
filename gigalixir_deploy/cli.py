import argparse
import asyncio
import json
import sys
from dataclasses import asdict

from pydantic import ValidationError

from .config import load_config
from .engine import DeploymentEngine
from .failure import DeployError
from .logger import setup_logging, get_logger

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def report_failure(message):
    # CI runners pick this up as the step's error annotation
    print(f"::error::{message}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="gigalixir-deploy",
        description="Deploy to Gigalixir, wait for the release and run migrations",
    )
    parser.add_argument("--log-level", default="INFO", type=str.upper, choices=LOG_LEVELS)
    sub = parser.add_subparsers(dest="cmd", required=True)

    deploy = sub.add_parser("deploy", help="full deployment, inputs from INPUT_* environment variables")
    deploy.add_argument("--app", help="overrides INPUT_GIGALIXIR_APP")
    deploy.add_argument("--migrations", action="store_true", default=None)
    deploy.add_argument("--migration-app-name")
    deploy.add_argument("--subfolder")
    deploy.add_argument("--hot-release", action="store_true", default=None)
    deploy.add_argument("--skip-install", action="store_true")

    current = sub.add_parser("current-release", help="print the live release number")
    current.add_argument("--app", required=True)

    wait = sub.add_parser("wait", help="wait for the release after --previous-release to be healthy")
    wait.add_argument("--app", required=True)
    wait.add_argument("--previous-release", type=int, required=True)

    return parser


def run_deploy(args):
    logger = get_logger("cli")
    try:
        config = load_config(
            gigalixir_app=args.app,
            migrations=args.migrations,
            migration_app_name=args.migration_app_name,
            app_subfolder=args.subfolder,
            hot_release=args.hot_release,
            install_client=False if args.skip_install else None,
        )
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        report_failure(f"Invalid configuration: {e.error_count()} error(s)")
        return 1

    result = asyncio.run(DeploymentEngine().deploy(config))
    print(json.dumps(asdict(result), indent=2))
    if not result.success:
        report_failure(result.message)
        return 1
    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.cmd == "deploy":
        sys.exit(run_deploy(args))

    engine = DeploymentEngine()
    try:
        if args.cmd == "current-release":
            print(asyncio.run(engine.inspector.get_current_release(args.app)))
        elif args.cmd == "wait":
            attempt = asyncio.run(engine.monitor.wait_for_healthy_release(args.previous_release, args.app))
            print(json.dumps(asdict(attempt), indent=2))
    except DeployError as e:
        report_failure(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
