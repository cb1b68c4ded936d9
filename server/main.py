from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Optional, Sequence

from server.config import SERVER_CONFIG, ConfigError, load_server_config
from server.core import ChatServer
from shared.protocol.errors import AddressInUse, InvalidAddress, InvalidHandle, PermissionDenied
from shared.protocol.validator import validate_handle, validate_port

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="chatserve", description="Accept chat peers one at a time.")
    ap.add_argument("port", nargs="?", help="port to listen on (default: SERVER_PORT)")
    ap.add_argument("--host", help="interface to bind (default: SERVER_HOST)")
    ap.add_argument("--handle", help="handle prefixed to outgoing messages (default: SERVER_HANDLE)")
    return ap


def install_signal_handlers(server: ChatServer) -> None:
    def _stop(signum, _frame) -> None:
        if server.acceptor.closed:
            # Second signal: abandon the session in progress as well.
            raise KeyboardInterrupt
        logger.info("Received signal %s, shutting down", signal.Signals(signum).name)
        server.shutdown()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)


def run_server(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        load_server_config()
    except ConfigError as exc:
        print(f"chatserve: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(level=SERVER_CONFIG["log_level"])

    try:
        port = validate_port(args.port) if args.port is not None else SERVER_CONFIG["port"]
        handle = validate_handle(args.handle) if args.handle else SERVER_CONFIG["handle"]
    except (InvalidAddress, InvalidHandle) as exc:
        print(f"chatserve: {exc.message}", file=sys.stderr)
        return 1

    server = ChatServer(
        args.host or SERVER_CONFIG["host"],
        port,
        handle,
        backlog=SERVER_CONFIG["backlog"],
    )
    try:
        server.start()
    except (AddressInUse, PermissionDenied) as exc:
        print(f"chatserve: {exc.message}", file=sys.stderr)
        return 2
    install_signal_handlers(server)
    print(f"Server listening on port {server.address[1]}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        server.shutdown()
        return 130
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    sys.exit(run_server(argv))


if __name__ == "__main__":
    main()
