from __future__ import annotations

import argparse
import logging
import sys

from .config import AssetsConfig, load_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="assetmill", description="Compile content-hashed assets and rewrite templates.")
    parser.add_argument("config", type=str, help="Path to YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    write = sub.add_parser("write", help="Write one asset under its hashed name")
    write.add_argument("name", type=str, help="Logical asset name, e.g. 'app'")
    write.add_argument("--path", type=str, default=None, help="Output path, relative to the config directory unless absolute")
    write.add_argument("--gzip", action="store_true", default=None, help="Also write a .gz variant")

    rewrite = sub.add_parser("rewrite", help="Replace asset directives in a template")
    rewrite.add_argument("input", type=str, nargs="?", default="-", help="Input file path or '-' for stdin")
    rewrite.add_argument("-o", "--output", type=str, default="-", help="Output file path or '-' for stdout")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    try:
        cfg: AssetsConfig = load_config(args.config)
        if args.command == "write":
            return _write(cfg, args)
        return _rewrite(cfg, args)
    except (ValueError, OSError) as e:
        logger.error("%s", e)
        return 1


def _write(cfg: AssetsConfig, args: argparse.Namespace) -> int:
    manager = cfg.build_manager()
    gzip = cfg.gzip if args.gzip is None else args.gzip
    name = manager.write(args.name, path=args.path or cfg.output, gzip=gzip)
    if name is None:
        return 1
    print(name)
    return 0


def _rewrite(cfg: AssetsConfig, args: argparse.Namespace) -> int:
    manager = cfg.build_manager()

    if args.input != "-" and args.output != "-":
        # Reads fully before writing, so output may name the input file
        manager.rewrite_file(args.input, args.output)
        return 0

    if args.input == "-":
        src = sys.stdin
    else:
        src = open(args.input, "r", encoding="utf-8")

    if args.output == "-":
        dst = sys.stdout
    else:
        dst = open(args.output, "w", encoding="utf-8")

    try:
        manager.rewrite_stream(src, dst)
        return 0
    finally:
        if src is not sys.stdin:
            src.close()
        if dst is not sys.stdout:
            dst.close()


if __name__ == "__main__":
    raise SystemExit(main())
