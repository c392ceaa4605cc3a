"""Command that runs the onboard network stack."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from collections.abc import Sequence
from ipaddress import IPv4Address

from satnetstack.forwarder import init_forwarder
from satnetstack.iru import Iru, IruError
from satnetstack.model import ConnType

DEFAULT_SOURCE_IP = "10.0.0.1"
DEFAULT_PORT = 1698


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="satnetstack", description="Run the onboard network stack."
    )
    parser.add_argument(
        "--source-ip",
        type=IPv4Address,
        default=IPv4Address(DEFAULT_SOURCE_IP),
        help="address of this node (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help="UDP port to forward to the stack (default: %(default)s)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Start forwarding and the router unit, then run until interrupted."""
    args = _parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] [%(name)s] %(message)s")

    try:
        init_forwarder(args.port, ConnType.UDP)
    except OSError as exc:
        print(f"[ERROR] [FRWDR] Forwarder initialization failed: {exc}", file=sys.stderr)
        return 1

    try:
        iru = Iru(args.source_ip)
    except IruError:
        print("[ERROR] [IRU] Initialization failed", file=sys.stderr)
        return 1

    with iru:
        try:
            threading.Event().wait()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())