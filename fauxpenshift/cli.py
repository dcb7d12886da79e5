import argparse
import logging
import os
import sys

from fauxpenshift.kube.wait import POLL_INTERVAL, WAIT_TIMEOUT


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fauxpenshift", description="Apply manifests and wait for workloads")
    parser.add_argument(
        "--kubeconfig",
        default=os.getenv("KUBECONFIG"),
        help="Path to the kubeconfig file (defaults to $KUBECONFIG, in-cluster, then ~/.kube/config)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.getenv("DEBUG", "false").lower() == "true",
        help="Enable debug logging (overrides --log-level to DEBUG)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    apply = sub.add_parser("apply", help="Server-side apply every document of the given manifests")
    apply.add_argument("-f", "--filename", dest="sources", action="append", required=True,
                       help="Manifest file or http(s) URL; may be repeated")
    apply.add_argument("--force-conflicts", action="store_true",
                       help="Take ownership of fields managed by other field managers")

    wait = sub.add_parser("wait", help="Wait until a deployment has a ready replica")
    wait.add_argument("namespace")
    wait.add_argument("deployment")
    wait.add_argument("--timeout", type=float, default=WAIT_TIMEOUT)
    wait.add_argument("--interval", type=float, default=POLL_INTERVAL)

    sub.add_parser("label-workers", help="Label all non control-plane nodes as workers")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    level_name = "DEBUG" if args.debug else args.log_level.upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("fauxpenshift.cli").debug("Running %s with level %s", args.command, level_name)

    from .main import run

    sys.exit(run(args))
