"""
命令行入口

    python -m form_agent run --first-name Ann --last-name Lee
    python -m form_agent serve
    python -m form_agent schedule
"""

import argparse
import asyncio

from .config import Settings, configure_logging
from .core import FormAgent
from .models import ObjectiveData

OPTIONAL_FIELDS = [
    ("--date-of-birth", "dateOfBirth"),
    ("--medical-id", "medicalId"),
    ("--gender", "gender"),
    ("--blood-type", "bloodType"),
    ("--allergies", "allergies"),
    ("--current-medications", "currentMedications"),
    ("--emergency-contact-name", "emergencyContactName"),
    ("--emergency-contact-phone", "emergencyContactPhone"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="form_agent", description="LLM 驱动的网页表单填写智能体")
    parser.add_argument("--max-steps", type=int, help="覆盖 MAX_STEPS")
    parser.add_argument("--headless", action="store_true", help="无头模式运行浏览器")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="运行一次")
    run.add_argument("--first-name", dest="firstName", default="Default")
    run.add_argument("--last-name", dest="lastName", default="User")
    for flag, dest in OPTIONAL_FIELDS:
        run.add_argument(flag, dest=dest)

    sub.add_parser("serve", help="启动 HTTP 服务")

    schedule = sub.add_parser("schedule", help="定时运行")
    schedule.add_argument("--interval", type=float, help="覆盖 SCHEDULE_INTERVAL_SECONDS")

    return parser


def objective_from_args(args: argparse.Namespace) -> ObjectiveData:
    values = {"firstName": args.firstName, "lastName": args.lastName}
    for _, dest in OPTIONAL_FIELDS:
        values[dest] = getattr(args, dest)
    return ObjectiveData(**values)


def main(argv=None):
    configure_logging()
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    if args.max_steps is not None:
        settings.max_steps = args.max_steps
    if args.headless:
        settings.headless = True

    if args.command == "serve":
        from .server import serve

        serve(settings)
    elif args.command == "schedule":
        from .scheduler import run_periodically

        interval = args.interval or settings.schedule_interval_seconds
        asyncio.run(run_periodically(FormAgent.from_settings(settings), interval))
    else:
        result = asyncio.run(FormAgent.from_settings(settings).run(objective_from_args(args)))
        print(f"运行结束：{result.outcome.value}（{result.steps} 步）")


if __name__ == "__main__":
    main()
