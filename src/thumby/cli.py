#!/usr/bin/env python3
"""
thumby CLI - Video thumbnail cards for Markdown notes.

Usage:
    thumby resolve "https://www.youtube.com/watch?v=VIDEO_ID"
    thumby process notes/video.md --vault notes
    thumby strip notes/video.md
    thumby insert "https://youtu.be/VIDEO_ID"
    thumby validate-config
"""

import argparse
import asyncio
import io
import json
import logging
import sys
from pathlib import Path

from thumby.cache.storage import LocalStorage
from thumby.config.loader import get_config
from thumby.host.base import BlockContext
from thumby.host.markdown import (
    LoggingNotifier,
    MarkdownCardRenderer,
    MarkdownDocument,
    StdinClipboard,
)
from thumby.operations.insert import build_video_block, remove_stored_info
from thumby.operations.resolve import BlockResolver


def _fail(message: str) -> None:
    print(f"ERROR: {message}", file=sys.stderr)
    sys.exit(1)


def _load_document(file: Path, vault: Path | None) -> tuple[MarkdownDocument, LocalStorage]:
    if not file.is_file():
        _fail(f"File not found: {file}")

    storage = LocalStorage(vault or file.parent)
    try:
        source_path = storage.relative(file)
    except ValueError:
        _fail(f"{file} is not inside vault {storage.root}")
    return MarkdownDocument.load(file, source_path=source_path), storage


def _cmd_resolve(args):
    """Handle the resolve subcommand."""
    config = get_config()
    storage = LocalStorage(args.vault or Path.cwd())
    renderer = MarkdownCardRenderer()

    async def run():
        async with BlockResolver(config, storage, notifier=LoggingNotifier()) as resolver:
            return await resolver.resolve(args.url, BlockContext("", 0, 0), renderer)

    resolution = asyncio.run(run())

    if args.json:
        print(json.dumps(resolution.to_dict(), indent=2))
    else:
        print(renderer.render())


def _cmd_process(args):
    """Handle the process subcommand."""
    config = get_config()
    document, storage = _load_document(args.file, args.vault)
    blocks = document.blocks()
    if not blocks:
        print(f"No video blocks in {args.file}")
        return

    renderers: dict[int, MarkdownCardRenderer] = {}

    def renderer_for(ctx: BlockContext) -> MarkdownCardRenderer:
        renderers[ctx.line_start] = MarkdownCardRenderer()
        return renderers[ctx.line_start]

    async def run():
        async with BlockResolver(
            config, storage, editor=document, notifier=LoggingNotifier()
        ) as resolver:
            return await resolver.resolve_many(blocks, renderer_for)

    results = asyncio.run(run())

    for (_, ctx), result in zip(blocks, results, strict=True):
        print(f"--- line {ctx.line_start + 1}")
        if isinstance(result, BaseException):
            print(f"ERROR: {result}")
        else:
            print(renderers[ctx.line_start].render())

    if args.dry_run:
        if document.dirty:
            print("\n=== UPDATED DOCUMENT (not written) ===")
            print(document.render(), end="")
    elif document.save():
        print(f"\nUpdated {args.file}")


def _cmd_strip(args):
    """Handle the strip subcommand."""
    document, _ = _load_document(args.file, None)
    stripped = sum(
        remove_stored_info(source, ctx, document) for source, ctx in document.blocks()
    )
    if document.save():
        print(f"Stripped stored info from {stripped} block(s) in {args.file}")
    else:
        print(f"No stored info in {args.file}")


def _cmd_insert(args):
    """Handle the insert subcommand."""
    clipboard = StdinClipboard(io.StringIO(args.url) if args.url else None)
    block = build_video_block(clipboard, LoggingNotifier())
    if block is None:
        sys.exit(1)
    print(block)


def _cmd_validate_config(args):
    """Handle the validate-config subcommand."""
    from thumby.config.loader import (
        _find_project_config,
        _get_user_config_path,
        _load_yaml_config,
        validate_config,
    )

    config_path = _find_project_config()
    if config_path is None and _get_user_config_path().exists():
        config_path = _get_user_config_path()

    if config_path is None:
        print("No config file found.")
        print("  Searched: .thumby/config.yaml (project)")
        print(f"  Searched: {_get_user_config_path()} (user)")
        print("\nUsing defaults (no validation needed).")
        sys.exit(0)

    print(f"Config file: {config_path}")
    yaml_config = _load_yaml_config(config_path, interpolate=False)
    if yaml_config is None:
        print("  Failed to parse config file.")
        sys.exit(1)

    result = validate_config(yaml_config)

    if result.errors:
        print(f"\nErrors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  x {error}")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  ! {warning}")

    if result.is_valid and not result.warnings:
        print("\nConfig is valid.")
    elif result.is_valid:
        print(f"\nConfig is valid with {len(result.warnings)} warning(s).")
    else:
        print(
            f"\nConfig is invalid: {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)."
        )

    sys.exit(0 if result.is_valid else 1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Video thumbnail cards for Markdown notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s resolve "https://www.youtube.com/watch?v=VIDEO_ID"
    %(prog)s resolve "https://vimeo.com/76979871" --json
    %(prog)s process note.md --vault ~/notes
    %(prog)s process note.md --dry-run
    %(prog)s strip note.md
    pbpaste | %(prog)s insert
    %(prog)s validate-config
        """,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")

    resolve_parser = subparsers.add_parser(
        "resolve", help="Resolve a video URL into a card"
    )
    resolve_parser.add_argument("url", help="Video URL")
    resolve_parser.add_argument(
        "--json", action="store_true", help="Print the resolution as JSON"
    )
    resolve_parser.add_argument(
        "--vault", type=Path, default=None,
        help="Storage root for saved thumbnails (default: current directory)",
    )

    process_parser = subparsers.add_parser(
        "process", help="Resolve every video block in a Markdown file"
    )
    process_parser.add_argument("file", type=Path, help="Markdown file")
    process_parser.add_argument(
        "--vault", type=Path, default=None,
        help="Storage root (default: the file's folder)",
    )
    process_parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the updated document instead of writing it",
    )

    strip_parser = subparsers.add_parser(
        "strip", help="Reduce stored blocks back to their URL"
    )
    strip_parser.add_argument("file", type=Path, help="Markdown file")

    insert_parser = subparsers.add_parser(
        "insert", help="Print a video block for a URL (read from stdin if omitted)"
    )
    insert_parser.add_argument("url", nargs="?", help="Video URL")

    subparsers.add_parser("validate-config", help="Validate configuration")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "resolve":
        _cmd_resolve(args)
    elif args.command == "process":
        _cmd_process(args)
    elif args.command == "strip":
        _cmd_strip(args)
    elif args.command == "insert":
        _cmd_insert(args)
    elif args.command == "validate-config":
        _cmd_validate_config(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
