"""
Launch the NetQuest API:

    netquest-server --port 8000

This launcher can:
- auto-select a free port if the requested one is taken
- start the FastAPI server
- open the browser on the API docs
"""
from __future__ import annotations

import argparse
import socket
import sys
import threading
import webbrowser
from dataclasses import dataclass

LOOPBACK = "127.0.0.1"
WILDCARD_HOSTS = frozenset({"0.0.0.0", "::", ""})


@dataclass(frozen=True)
class PortChoice:
    host: str
    requested: int
    port: int

    @property
    def fell_back(self) -> bool:
        return self.port != self.requested

    @property
    def docs_url(self) -> str:
        host = LOOPBACK if self.host in WILDCARD_HOSTS else self.host
        return f"http://{host}:{self.port}/docs"


def _bind_error(host: str, port: int) -> OSError | None:
    try:
        with socket.create_server((host, port), reuse_port=False):
            return None
    except OSError as exc:
        return exc


def pick_port(host: str, requested: int, *, attempts: int = 50) -> PortChoice:
    """First port from ``requested`` upwards that ``host`` can bind."""
    if attempts < 1:
        raise ValueError("attempts must be >= 1")
    error: OSError | None = None
    for port in range(requested, requested + attempts):
        error = _bind_error(host, port)
        if error is None:
            return PortChoice(host=host, requested=requested, port=port)
    raise RuntimeError(f"No free port in {requested}-{requested + attempts - 1} on {host} (last error: {error})")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="netquest-server",
        description="Run the NetQuest mission API and open the interactive docs.",
    )
    parser.add_argument("--host", default=LOOPBACK, help="Host to listen on (default: %(default)s).")
    parser.add_argument("--port", type=int, default=8000, help="Starting port (default: %(default)s).")
    parser.add_argument("--no-reload", action="store_true", help="Disable uvicorn --reload.")
    parser.add_argument("--no-open", action="store_true", help="Skip opening the browser automatically.")
    parser.add_argument("--attempts", type=int, default=50, help="Ports to try before giving up (default: %(default)s).")
    args = parser.parse_args(argv)

    try:
        choice = pick_port(args.host, args.port, attempts=args.attempts)
    except (RuntimeError, ValueError) as exc:
        print(f"[netquest] Failed to select a free port: {exc}", file=sys.stderr)
        return 2

    note = f" ({args.port} was busy)" if choice.fell_back else ""
    print(f"[netquest] Serving mission API on {choice.docs_url}{note}.")

    if not args.no_open:
        threading.Timer(1.0, webbrowser.open, args=(choice.docs_url,)).start()

    import uvicorn

    try:
        uvicorn.run(
            "netquest.web.main:app",
            host=args.host,
            port=choice.port,
            reload=not args.no_reload,
        )
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
