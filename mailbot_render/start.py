"""Command line preview of rendered bot messages"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mailbot_render.config_loader import ConfigError, config_from_env, load_config
from mailbot_render.models import EmailRecord
from mailbot_render.render import EmailRenderer

logger = logging.getLogger("mailbot_render")

CLI_MODES = ("list", "preview", "summary")


def _configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailbot_render",
        description="Render a cached email as Telegram message parameters.",
    )
    parser.add_argument("email", type=Path, help="Path to the cached email JSON")
    parser.add_argument("--mode", choices=CLI_MODES, default="list")
    parser.add_argument(
        "--config-dir",
        type=Path,
        help="Directory holding config.ini and keys.ini (environment variables when omitted)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = load_config(args.config_dir) if args.config_dir else config_from_env()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    try:
        with open(args.email, "r", encoding="utf-8") as fh:
            mail = EmailRecord.from_dict(json.load(fh))
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        logger.error("Cannot read email %s: %s", args.email, exc)
        return 1

    # Debug mode is not offered, so no address checker is wired in.
    renderer = EmailRenderer(config)
    result = asyncio.run(renderer.render(args.mode, mail))
    print(json.dumps(result.to_telegram(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
