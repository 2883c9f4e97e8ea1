from __future__ import annotations
import argparse
import json
import sys
from pydantic import ValidationError
from .settings import Settings
from .logging_setup import setup_logging, get_logger
from .orchestrator import Orchestrator
from .exceptions import ConfigMissingError, UpdaterError

log = get_logger("serverpack.updater.cli")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serverpack-update",
        description="Fetch the newest CurseForge server pack and point launch.sh / Dockerfile at it.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Resolve the release and print the plan as JSON; change nothing")
    return parser

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings()
    except ValidationError as e:
        print(f"FATAL: invalid configuration: {e}", file=sys.stderr)
        return 1
    setup_logging(settings)

    try:
        settings.require_api_key()
    except ConfigMissingError as e:
        log.error("FATAL: %s", e)
        return 1

    try:
        orch = Orchestrator(settings)
        if args.dry_run:
            plan = orch.plan().to_dict()
            print(json.dumps(plan, indent=2, ensure_ascii=False))
            return 0 if plan.get("ok", True) else 1
        report = orch.run()
    except UpdaterError as e:
        log.error("An error occurred during the update process: %s", e)
        return 1
    except Exception as e:
        log.exception("Unexpected failure during the update process: %s", e)
        return 1

    log.info("Server files now at %s (jar: %s)", report.release.version_label, report.server_jar or "unchanged")
    log.info("Run report: %s", json.dumps(report.to_dict(), ensure_ascii=False, default=str))
    return 0

if __name__ == "__main__":
    sys.exit(main())
