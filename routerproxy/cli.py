#!/usr/bin/env python3
"""
RouterProxy CLI — Talk to OpenRouter from the terminal.

Usage:
    python -m routerproxy.cli ask "What is JavaScript?"
    python -m routerproxy.cli ask "Weather in London?" --schema weather.json
    python -m routerproxy.cli credits
    python -m routerproxy.cli providers
    python -m routerproxy.cli serve [--port 8080]

Uses the same settings (.env / environment) and gateway as the HTTP
service. Exit status is 1 whenever the gateway reports a failure.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

from routerproxy.config import get_settings
from routerproxy.connectors import AsyncOpenRouterClient
from routerproxy.logging import setup_logging


def _print_json(value: Any) -> None:
    print(json.dumps(value, indent=2, ensure_ascii=False))


async def _with_gateway(call: Callable[[AsyncOpenRouterClient], Awaitable[Any]]) -> Any:
    gateway = AsyncOpenRouterClient(get_settings().openrouter_config())
    try:
        return await call(gateway)
    finally:
        await gateway.close()


def _ask(args: argparse.Namespace) -> int:
    if args.schema:
        schema = json.loads(Path(args.schema).read_text(encoding="utf-8"))
        result = asyncio.run(_with_gateway(lambda g: g.send_structured(args.message, schema)))
        if result is None:
            print("Error: no structured reply from OpenRouter (see logs).", file=sys.stderr)
            return 1
        _print_json(result)
        return 0

    reply = asyncio.run(_with_gateway(lambda g: g.send_message(args.message)))
    if not reply:
        print("Error: no reply from OpenRouter (see logs).", file=sys.stderr)
        return 1
    print(reply)
    return 0


def _fetch(args: argparse.Namespace) -> int:
    if args.command == "credits":
        result = asyncio.run(_with_gateway(lambda g: g.get_account_credits()))
    else:
        result = asyncio.run(_with_gateway(lambda g: g.list_providers()))
    if result is None:
        print(f"Error: failed to fetch {args.command} (see logs).", file=sys.stderr)
        return 1
    _print_json(result)
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("app:app", host=args.host, port=args.port or get_settings().port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routerproxy", description="RouterProxy management CLI"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ask = subparsers.add_parser("ask", help="Send one message and print the reply")
    ask.add_argument("message", help="User message")
    ask.add_argument("--schema", help="Path to a response_format json_schema file")
    ask.set_defaults(handler=_ask)

    for name, help_text in (("credits", "Show account credits"), ("providers", "List providers")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.set_defaults(handler=_fetch)

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(handler=_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
