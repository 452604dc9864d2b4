"""CLI entrypoints for mergegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Sequence

from .config import ConfigError, load_config
from .errors import ParseError, SigningError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .mergegen.yml or its directory (defaults to the current directory).",
    )


def _add_rekey_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--rekey",
        action="append",
        default=[],
        metavar="NEW=OLD[,OLD...]",
        help="Recover manual content for a renamed section from its former ids.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mergegen",
        description="Merge regenerated code with hand-edited manual sections.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    merge_parser = subparsers.add_parser(
        "merge",
        help="Merge a freshly generated file into its previous output.",
    )
    _add_verbose_option(merge_parser, suppress_default=True)
    _add_config_option(merge_parser)
    _add_rekey_option(merge_parser)
    merge_parser.add_argument("generated", help="Freshly generated file.")
    merge_parser.add_argument("target", help="Output file holding manual edits (created if missing).")
    merge_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the diff without writing the target.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Exit non-zero when the target is stale relative to the generated file.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_config_option(check_parser)
    _add_rekey_option(check_parser)
    check_parser.add_argument("generated", help="Freshly generated file.")
    check_parser.add_argument("target", help="Output file to compare against.")

    extract_parser = subparsers.add_parser(
        "extract",
        help="Print a file with its manual sections removed.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    _add_config_option(extract_parser)
    extract_parser.add_argument("path", help="File to extract generated code from.")

    validate_parser = subparsers.add_parser(
        "validate",
        help="Check that manual-section markers are well formed.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    _add_config_option(validate_parser)
    validate_parser.add_argument("paths", nargs="+", help="Files to validate.")

    sign_parser = subparsers.add_parser(
        "sign",
        help="Write a signature over the generated content of each file.",
    )
    _add_verbose_option(sign_parser, suppress_default=True)
    _add_config_option(sign_parser)
    sign_parser.add_argument("paths", nargs="+", help="Files holding a signature placeholder.")

    verify_parser = subparsers.add_parser(
        "verify",
        help="Fail when generated content was edited outside manual sections.",
    )
    _add_verbose_option(verify_parser, suppress_default=True)
    _add_config_option(verify_parser)
    verify_parser.add_argument("paths", nargs="+", help="Signed files to verify.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP merge service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def parse_rekeys(values: Sequence[str]) -> Dict[str, List[str]]:
    """Parse ``NEW=OLD[,OLD...]`` arguments into a rekey mapping."""
    rekeys: Dict[str, List[str]] = {}
    for value in values:
        new_id, sep, legacy = value.partition("=")
        new_id = new_id.strip()
        legacy_ids = [item.strip() for item in legacy.split(",") if item.strip()]
        if not sep or not new_id or not legacy_ids:
            raise ValueError(f"Invalid --rekey value {value!r}; expected NEW=OLD[,OLD...]")
        rekeys.setdefault(new_id, []).extend(legacy_ids)
    return rekeys


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for mergegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config or "."))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(config.logging, verbose=bool(args.verbose))
    orchestrator = Orchestrator(config)

    try:
        if args.command == "merge":
            _run_merge(parser, orchestrator, args)
        elif args.command == "check":
            _run_check(parser, orchestrator, args)
        elif args.command == "extract":
            sys.stdout.write(orchestrator.run_extract(args.path))
        elif args.command == "validate":
            for path in args.paths:
                orchestrator.run_validate(path)
                print(f"{_relativize(Path(path))}: ok")
        elif args.command == "sign":
            for path in args.paths:
                changed = orchestrator.run_sign(path)
                print(f"{_relativize(Path(path))}: {'signed' if changed else 'unchanged'}")
        elif args.command == "verify":
            _run_verify(parser, orchestrator, args)
        elif args.command == "serve":  # pragma: no cover - integration path
            from .service import run_service

            run_service(host=args.host, port=args.port, config=config)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (ParseError, SigningError) as exc:
        parser.exit(1, f"mergegen {args.command} failed: {exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")


def _run_merge(
    parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace
) -> None:
    rekeys = _rekeys_or_exit(parser, args.rekey)
    generated = Path(args.generated).read_text(encoding="utf-8")
    dry_run = bool(args.dry_run)
    result = orchestrator.run_merge(args.target, generated, rekeys=rekeys, dry_run=dry_run)
    rel_path = _relativize(result.path)
    if not result.changed:
        message = f"{rel_path} already up to date"
        if dry_run:
            message += " (dry-run)"
        print(message)
    elif dry_run:
        print(f"{rel_path} changes (dry-run):")
        print(result.diff or "(no diff)")
    else:
        print(f"{rel_path} {result.action}")


def _run_check(
    parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace
) -> None:
    rekeys = _rekeys_or_exit(parser, args.rekey)
    generated = Path(args.generated).read_text(encoding="utf-8")
    if not orchestrator.run_check(args.target, generated, rekeys=rekeys):
        parser.exit(1, f"{_relativize(Path(args.target))} is out of date\n")
    print(f"{_relativize(Path(args.target))} is up to date")


def _run_verify(
    parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace
) -> None:
    failures = 0
    for path in args.paths:
        result = orchestrator.run_verify(path)
        print(f"{_relativize(Path(path))}: {result.status}")
        if not result.ok:
            failures += 1
    if failures:
        parser.exit(1, f"{failures} file(s) failed signature verification\n")


def _rekeys_or_exit(
    parser: argparse.ArgumentParser, values: Sequence[str]
) -> Dict[str, List[str]]:
    try:
        return parse_rekeys(values)
    except ValueError as exc:
        parser.exit(2, f"{exc}\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
