"""Gazer CLI — gazer serve / gazer check-translations.

Entry point for the ``gazer`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys

from gazer.i18n import SUPPORTED_LANGUAGES, t


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the gazer CLI."""
    parser = argparse.ArgumentParser(
        prog="gazer",
        description=t("cli.description"),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # gazer serve
    serve_parser = subparsers.add_parser("serve", help=t("cli.help.serve"))
    serve_parser.add_argument("root", nargs="?", default=".", help=t("cli.help.root"))
    serve_parser.add_argument("--host", default=None, help=t("cli.help.host"))
    serve_parser.add_argument("--port", type=int, default=None, help=t("cli.help.port"))
    serve_parser.add_argument(
        "--ws-port", type=int, default=None, help=t("cli.help.wsPort"),
    )
    serve_parser.add_argument("--editor", default=None, help=t("cli.help.editor"))
    serve_parser.add_argument(
        "--lang", choices=SUPPORTED_LANGUAGES, default=None, help=t("cli.help.lang"),
    )

    # gazer check-translations
    subparsers.add_parser("check-translations", help=t("cli.help.checkTranslations"))

    return parser


def _get_version() -> str:
    """Get the package version."""
    from gazer import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "check-translations":
        from gazer.i18n.validate import print_report

        sys.exit(0 if print_report() else 1)

    if args.command == "serve":
        from gazer.app import serve

        serve(
            root=args.root,
            host=args.host,
            port=args.port,
            ws_port=args.ws_port,
            editor=args.editor,
            language=args.lang,
        )


if __name__ == "__main__":
    main()
