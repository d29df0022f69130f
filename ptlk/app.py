from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv
from rich.console import Console
from rich.live import Live

from ptlk import __version__
from ptlk.api import ApiClient
from ptlk.keys import KeyReader, handle_key_event
from ptlk.model import RuntimeState
from ptlk.screen import Frame

LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "https://potluck-xl.vercel.app"
API_URL_ENV = "POTLUCK_API_URL"
DEFAULT_LIMIT = 50
DEFAULT_LOG_FILE = "ptlk.log"
FIRST_PAGE = 1
POLL_TIMEOUT_SECONDS = 0.1


@dataclass
class AppConfig:
    api_url: str
    limit: int
    debug: bool
    log_file: str


def parse_args(argv: list[str]) -> AppConfig:
    parser = argparse.ArgumentParser(
        prog="ptlk",
        description="Potluck TUI - AI-powered tech news reader.",
    )
    parser.add_argument(
        "--api-url",
        default=os.getenv(API_URL_ENV, DEFAULT_API_URL),
        help=f"API base URL (env: {API_URL_ENV}).",
    )
    parser.add_argument(
        "-l",
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help="Number of articles to fetch per page.",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Write debug logs to --log-file.")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    if args.limit < 1:
        raise ValueError("--limit must be >= 1")
    if not args.api_url.strip():
        raise ValueError("--api-url must not be empty")

    return AppConfig(
        api_url=args.api_url,
        limit=args.limit,
        debug=args.debug,
        log_file=args.log_file,
    )


def setup_logging(config: AppConfig) -> None:
    # The live screen owns the terminal, so records never go to stderr.
    if config.debug:
        logging.basicConfig(
            filename=config.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.basicConfig(level=logging.WARNING, handlers=[logging.NullHandler()])


def fetch_into(
    state: RuntimeState,
    client: ApiClient,
    live: Live,
    limit: int,
    refresh: bool = False,
) -> None:
    model = state.model
    model.begin_loading()
    live.update(Frame(model, client.base_url), refresh=True)
    result = client.fetch_latest(FIRST_PAGE, limit)
    if refresh:
        model.refresh(result)
    else:
        model.load(result)


def run(config: AppConfig, console: Console) -> int:
    if not sys.stdin.isatty():
        console.print("[red]ptlk needs an interactive terminal on stdin.[/red]")
        return 2

    client = ApiClient(config.api_url)
    state = RuntimeState()
    LOGGER.info("Starting ptlk %s against %s", __version__, client.base_url)

    with KeyReader() as keys, Live(
        Frame(state.model, client.base_url),
        console=console,
        screen=True,
        auto_refresh=False,
        vertical_overflow="crop",
    ) as live:
        fetch_into(state, client, live, config.limit)
        while True:
            live.update(Frame(state.model, client.base_url), refresh=True)
            if state.should_quit:
                break
            if state.needs_refresh:
                state.needs_refresh = False
                LOGGER.info("Refresh requested")
                fetch_into(state, client, live, config.limit, refresh=True)
            event = keys.poll(POLL_TIMEOUT_SECONDS)
            if event is not None:
                handle_key_event(state, event, client.base_url)

    LOGGER.info("Quit requested")
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    console = Console()
    try:
        config = parse_args(argv if argv is not None else sys.argv[1:])
    except ValueError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        return 2

    setup_logging(config)
    try:
        return run(config, console)
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
