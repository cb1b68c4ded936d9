from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from client.config import CLIENT_CONFIG, ConfigError, load_config
from client.core import connect
from shared.chat import ChatSession, Console, Role
from shared.protocol.errors import ConnectFailed, InvalidAddress, InvalidHandle
from shared.protocol.validator import validate_handle, validate_hostname, validate_port

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="chatclient", description="Chat with a listening peer.")
    ap.add_argument("host", nargs="?", help="listener hostname (default: CLIENT_SERVER_HOST)")
    ap.add_argument("port", nargs="?", help="listener port (default: CLIENT_SERVER_PORT)")
    return ap


def run_client(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        load_config()
    except ConfigError as exc:
        print(f"chatclient: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(level=CLIENT_CONFIG["log_level"])
    console = console or Console()

    try:
        host = validate_hostname(args.host or CLIENT_CONFIG["server_host"])
        port = validate_port(args.port if args.port is not None else CLIENT_CONFIG["server_port"])
        handle = validate_handle(CLIENT_CONFIG["handle"]) if CLIENT_CONFIG["handle"] else console.prompt_handle()
    except (InvalidAddress, InvalidHandle) as exc:
        console.warn(f"chatclient: {exc.message}")
        return 1
    if handle is None:
        return 1

    try:
        connection = connect(host, port, timeout=CLIENT_CONFIG["connect_timeout"])
    except ConnectFailed as exc:
        console.warn(f"chatclient: {exc.message}")
        return 2

    try:
        outcome = ChatSession(connection, Role.DIALER, handle, console).run()
    except KeyboardInterrupt:
        console.show("\nInterrupted. Socket closed.")
        return 130
    logger.debug("Dialer session finished with %s", outcome)
    console.show("Socket closed. Exiting.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    sys.exit(run_client(argv))


if __name__ == "__main__":
    main()
