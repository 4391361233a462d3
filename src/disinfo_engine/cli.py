from __future__ import annotations
import argparse
import sys
from rich import print

from .errors import DisinfoError
from .moderation.pipeline import get_analyzer
from .moderation.report import print_history, print_result
from .telemetry.telemetry import setup_logging, setup_tracing


def _cmd_analyze(text: str) -> int:
    try:
        res = get_analyzer().analyze(text)
    except DisinfoError as e:
        print(f"[red]{e.user_message}[/red]")
        return 1
    print_result(res)
    return 0


def _cmd_history() -> int:
    store = get_analyzer().history
    print_history(store.items() if store is not None else [])
    return 0


def _cmd_serve(host: str, port: int) -> int:
    import uvicorn
    uvicorn.run("disinfo_engine.api.main:app", host=host, port=port)
    return 0


def main(argv=None) -> int:
    ap = argparse.ArgumentParser("Disinformation Hunter CLI")
    ap.add_argument("--trace", action="store_true", help="Print OpenTelemetry spans to the console")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_an = sub.add_parser("analyze", help="Classify text or a Reddit post link")
    p_an.add_argument("--text", required=True, help="Text to check, or a Reddit post URL")

    sub.add_parser("history", help="Show the last analyses")

    p_srv = sub.add_parser("serve", help="Run the HTTP API")
    p_srv.add_argument("--host", default="127.0.0.1")
    p_srv.add_argument("--port", type=int, default=8000)

    args = ap.parse_args(argv)

    setup_logging()
    if args.trace:
        setup_tracing(service_name="disinfo")

    if args.cmd == "analyze":
        return _cmd_analyze(args.text)
    if args.cmd == "history":
        return _cmd_history()
    return _cmd_serve(args.host, args.port)


if __name__ == "__main__":
    sys.exit(main())
