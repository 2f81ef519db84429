"""TCP debug server for external debuggers.

Requests and responses are newline-delimited JSON objects handled by a
DebugSession. Can optionally launch the GUI for the same driver instance.
"""

from __future__ import annotations

import argparse
import json
import logging
import socketserver
import threading

from chip8vm.core.driver import TickDriver
from chip8vm.debug.session import DebugSession
from chip8vm.utils.config_loader import load_config

logger = logging.getLogger(__name__)


class _DebugHandler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        session: DebugSession = self.server.session  # type: ignore[attr-defined]
        while True:
            line = self.rfile.readline()
            if not line:
                break
            try:
                request = json.loads(line.decode("utf-8"))
            except json.JSONDecodeError as exc:
                response = {"ok": False, "error": f"Invalid JSON: {exc}"}
            else:
                if isinstance(request, dict):
                    response = session.handle_request(request)
                else:
                    response = {"ok": False, "error": "Request must be a JSON object"}

            self.wfile.write((json.dumps(response) + "\n").encode("utf-8"))


class DebugServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, host: str, port: int, session: DebugSession):
        super().__init__((host, port), _DebugHandler)
        self.session = session


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="CHIP-8 debug server")
    parser.add_argument("rom", nargs="?", help="ROM file to load at 0x200")
    parser.add_argument("--config", default=None, help="Path to machine config YAML")
    parser.add_argument(
        "--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port", type=int, default=3333, help="Bind port (default: 3333)"
    )
    parser.add_argument(
        "--gui",
        action="store_true",
        help="Also show the GUI for the same machine",
    )
    return parser.parse_args(argv)


def _run_with_gui(
    driver: TickDriver, session: DebugSession, lock: threading.RLock, args: argparse.Namespace
) -> int:
    try:
        from chip8vm_gui.app import run_gui
    except ImportError as exc:  # pragma: no cover - optional GUI dependency
        logger.warning("GUI unavailable: %s", exc)
        return _serve(session, args)

    server = DebugServer(args.host, args.port, session)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    logger.info("Debug server listening on %s:%d", args.host, args.port)
    try:
        return run_gui([], driver=driver, lock=lock, external_clock=True)
    finally:
        server.shutdown()
        server.server_close()


def _serve(session: DebugSession, args: argparse.Namespace) -> int:
    server = DebugServer(args.host, args.port, session)
    logger.info("Debug server listening on %s:%d", args.host, args.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    args = _parse_args(argv)

    driver = TickDriver(config=load_config(args.config))
    if args.rom:
        driver.load_file(args.rom)
    driver.start_timers()

    lock = threading.RLock()
    session = DebugSession(driver, lock=lock)

    try:
        if args.gui:
            return _run_with_gui(driver, session, lock, args)
        return _serve(session, args)
    finally:
        driver.stop_timers()


if __name__ == "__main__":
    raise SystemExit(main())
