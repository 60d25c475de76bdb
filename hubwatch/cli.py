"""Command line interface for the hub monitor."""

from __future__ import annotations

import argparse
import json
from datetime import timedelta
from pathlib import Path
from typing import Any

from .bootstrap import bootstrap
from .utils import utc_now


def _print(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _base_dir(args) -> Path | None:
    return Path(args.base_dir) if args.base_dir else None


def cmd_runserver(args):
    from .app import create_app

    ctx = bootstrap(_base_dir(args), start_poller=False if args.no_poll else None)
    app = create_app(ctx)
    app.run(host=args.host or ctx.config.web.host, port=args.port or ctx.config.web.port)


def cmd_poll(args):
    ctx = bootstrap(_base_dir(args), start_poller=False)
    try:
        if args.once:
            report = ctx.scheduler.run_cycle()
            _print(
                {
                    "ok": report.ok,
                    "servers": report.servers,
                    "players": report.players,
                    "evicted": report.evicted,
                    "zeroed": report.zeroed,
                    "errors": report.errors,
                }
            )
        else:
            ctx.scheduler.run_forever()
    except KeyboardInterrupt:
        pass
    finally:
        ctx.shutdown()


def cmd_servers(args):
    ctx = bootstrap(_base_dir(args), start_poller=False)
    _print({"servers": [entry.to_dict() for entry in ctx.store.load_entries()]})
    ctx.shutdown()


def cmd_history(args):
    ctx = bootstrap(_base_dir(args), start_poller=False)
    points = ctx.stats.recent(args.server_id, utc_now(), timedelta(hours=args.hours))
    _print({"server_id": args.server_id, "points": [p.to_dict() for p in points]})
    ctx.shutdown()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Game server hub monitor")
    sub = parser.add_subparsers(dest="command", required=True)

    runserver = sub.add_parser("runserver", help="Start HTTP server and background poller")
    runserver.add_argument("--host")
    runserver.add_argument("--port", type=int)
    runserver.add_argument("--no-poll", action="store_true", help="Serve stored data only")
    runserver.add_argument("--base-dir")
    runserver.set_defaults(func=cmd_runserver)

    poll = sub.add_parser("poll", help="Run poll cycles in the foreground")
    poll.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    poll.add_argument("--base-dir")
    poll.set_defaults(func=cmd_poll)

    servers = sub.add_parser("servers", help="List stored servers")
    servers.add_argument("--base-dir")
    servers.set_defaults(func=cmd_servers)

    history = sub.add_parser("history", help="Show player history of a server")
    history.add_argument("server_id")
    history.add_argument("--hours", type=int, default=24)
    history.add_argument("--base-dir")
    history.set_defaults(func=cmd_history)

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
