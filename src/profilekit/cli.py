"""profilekitのコマンドラインインタフェース。"""

import argparse
import json
import logging
from pathlib import Path

from profilekit.config import ProfileConfig, ServerConfig, load_config
from profilekit.logging_config import configure_logging
from profilekit.models.errors import ProfileKitError
from profilekit.services.archive import ProfileArchiver
from profilekit.services.profile import DiagnosticCollector, load_profile

logger = logging.getLogger("profilekit")

EXIT_OK = 0
EXIT_FAILED = 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Profile root directory.")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file.")
    parser.add_argument("--id", default=None, help="Override the profile identifier.")
    parser.add_argument("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR).")
    parser.add_argument("--log-format", choices=["text", "json"], default=None, help="Log output format.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="profilekit", description="Validate and package compliance profiles.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Verify profile metadata and structure.")
    _add_common_arguments(check)
    check.add_argument("--format", choices=["text", "json"], default="text", help="Report format.")

    export = subparsers.add_parser("json", help="Export the profile summary as JSON.")
    _add_common_arguments(export)
    export.add_argument("--output", type=Path, default=None, help="Write to this file instead of stdout.")
    export.add_argument("--compact", action="store_true", help="Emit compact JSON.")

    archive = subparsers.add_parser("archive", help="Package the profile into a tar.gz or zip archive.")
    _add_common_arguments(archive)
    archive.add_argument("--output", type=Path, default=None, help="Archive path.")
    fmt = archive.add_mutually_exclusive_group()
    fmt.add_argument("--zip", dest="archive_format", action="store_const", const="zip", help="Create a zip archive.")
    fmt.add_argument("--tar", dest="archive_format", action="store_const", const="tar", help="Create a tar.gz archive.")
    archive.add_argument("--overwrite", action="store_const", const=True, default=None, help="Replace an existing archive.")

    serve = subparsers.add_parser("serve", help="Run the MCP server.")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser


def _load_config(args: argparse.Namespace) -> ProfileConfig:
    return load_config(
        args.config,
        id=args.id,
        log_level=args.log_level,
        log_format=args.log_format,
        output=getattr(args, "output", None),
        archive_format=getattr(args, "archive_format", None),
        overwrite=getattr(args, "overwrite", None),
    )


def cmd_check(args: argparse.Namespace, config: ProfileConfig) -> int:
    if args.format == "json":
        collector = DiagnosticCollector()
        profile = load_profile(args.path, config, sink=collector)
        result = profile.check()
        report = {
            "summary": profile.info().model_dump(mode="json", exclude_none=True),
            "result": result.to_dict(),
        }
        print(json.dumps(report, indent=2, ensure_ascii=False))
    else:
        result = load_profile(args.path, config).check()
    return EXIT_OK if result.passed else EXIT_FAILED


def cmd_json(args: argparse.Namespace, config: ProfileConfig) -> int:
    profile = load_profile(args.path, config)
    text = profile.info().to_json(pretty=not args.compact)
    if config.output is not None:
        config.output.write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote profile summary to %s", config.output)
    else:
        print(text)
    return EXIT_OK


def cmd_archive(args: argparse.Namespace, config: ProfileConfig) -> int:
    profile = load_profile(args.path, config)
    if not profile.check().passed:
        logger.error("Profile check failed. Please fix the profile before generating an archive.")
        return EXIT_FAILED
    ProfileArchiver().archive(
        profile,
        output=config.output,
        fmt=config.archive_format,
        overwrite=config.overwrite,
    )
    return EXIT_OK


def cmd_serve(args: argparse.Namespace) -> int:
    from profilekit.server import run_server

    overrides = {key: value for key, value in {"host": args.host, "port": args.port}.items() if value is not None}
    run_server(ServerConfig(**overrides))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """CLIを実行して終了コードを返す。合格なら0、不合格または致命的エラーなら1。"""
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        configure_logging()
        return cmd_serve(args)

    try:
        config = _load_config(args)
    except ProfileKitError as e:
        configure_logging()
        logger.error("%s", e)
        return EXIT_FAILED
    configure_logging(config.log_level, json_format=config.log_format == "json")

    handlers = {"check": cmd_check, "json": cmd_json, "archive": cmd_archive}
    try:
        return handlers[args.command](args, config)
    except ProfileKitError as e:
        logger.error("%s", e)
        return EXIT_FAILED
