#!/usr/bin/env python3
"""Command line entry point: ask several providers and print the synthesized answer."""

import argparse
import json
import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import Config
from models.errors import InputValidationError
from orchestrator.meta_client import MetaClient
from models.provider_answer import ProviderName

DEFAULT_PROVIDERS = ",".join(p.value for p in ProviderName)


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stderr.write(f'\r\033[93mAsking providers {char}\033[0m')
            sys.stderr.flush()
            time.sleep(0.1)
    sys.stderr.write('\r' + ' ' * 40 + '\r')
    sys.stderr.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ask several AI providers and synthesize one answer")
    parser.add_argument("prompt", help="Question to send to every provider")
    parser.add_argument(
        "--providers",
        default=DEFAULT_PROVIDERS,
        help=f"Comma-separated provider ids (default: {DEFAULT_PROVIDERS})",
    )
    parser.add_argument("--retrieval", action="store_true", help="Add web sources to the prompt")
    parser.add_argument("--system-prompt", default=None, help="Override the default system prompt")
    parser.add_argument("--json", action="store_true", help="Print the Summary as JSON")
    return parser


def print_report(run) -> None:
    for answer in run.answers:
        status = f"error: {answer.error}" if answer.error else f"{answer.latency_ms} ms"
        print(f"\033[96m[{answer.provider}/{answer.model or '-'}]\033[0m {status}")

    print("\n=== Summary ===")
    print(run.summary.final_answer)

    if run.summary.disagreements:
        print("\n=== Disagreements ===")
        for item in run.summary.disagreements:
            print(f"- {item}")

    if run.sources:
        print("\n=== Sources ===")
        for source in run.sources:
            print(f"[{source.id}] {source.title} {source.url}".rstrip())


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    providers = [p.strip() for p in args.providers.split(",") if p.strip()]

    client = MetaClient.from_config(Config())

    stop_event = threading.Event()
    spinner = None
    if not args.json and sys.stderr.isatty():
        spinner = threading.Thread(target=show_loading_animation, args=(stop_event,), daemon=True)
        spinner.start()

    try:
        run = client.run_sync(
            args.prompt,
            providers,
            use_retrieval=args.retrieval,
            system_prompt=args.system_prompt,
        )
    except InputValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        stop_event.set()
        if spinner:
            spinner.join()

    if args.json:
        print(json.dumps(run.summary.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_report(run)
    return 0


if __name__ == "__main__":
    sys.exit(main())
