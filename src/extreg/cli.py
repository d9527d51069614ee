"""Command-line entry point: load plugins and print the resulting factory."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from extreg.config import Config
from extreg.errors import ExtregError
from extreg.loader import PluginLoader

logger = logging.getLogger(__name__)

__all__ = ["main", "build_parser"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extreg",
        description="Load extension function plugins and list their namespaces.",
    )
    parser.add_argument(
        "plugin_dirs",
        nargs="+",
        metavar="DIR",
        help="plugin directory to scan; comma-separated lists are accepted",
    )
    parser.add_argument("--config", metavar="FILE", help="YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config.from_yaml(args.config) if args.config else Config.from_env()
    except ExtregError as e:
        logger.error("%s", e)
        return 2
    except OSError as e:
        logger.error("Unable to read config file %s: %s", args.config, e)
        return 1

    try:
        loader = PluginLoader(",".join(args.plugin_dirs), config=config)
        factory = loader.get_transformer_factory()
    except ExtregError as e:
        logger.error("%s", e)
        return 2
    except OSError as e:
        logger.error("Unable to read plugin directories: %s", e)
        return 1

    print(repr(factory))
    for xmlns in loader.get_prefix_namespace():
        print(xmlns)
    return 0


if __name__ == "__main__":
    sys.exit(main())
