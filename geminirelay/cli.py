"""Command line entry point for the standalone relay server."""

import argparse
import logging

from geminirelay.config import RelayConfig
from geminirelay.server import main as run_server


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Relay WebSocket messages to Gemini.")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument("--model")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RelayConfig:
    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port), ("model", args.model))
        if value is not None
    }
    return RelayConfig(**overrides)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_server(build_config(args))


if __name__ == "__main__":
    main()
