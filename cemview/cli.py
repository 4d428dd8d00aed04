"""CLI entrypoints for cemview commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Dict, List, Sequence

from .config import LIST_FORMATS, CemViewConfig, ConfigError, load_config
from .loader import load_manifest
from .logging import configure_logging, get_logger
from .manifest import ManifestError, Package, encode_package
from .query import PathQueryEngine, QueryError
from .render import (
    Predicate,
    Renderable,
    RenderablePackage,
    everything,
    is_deprecated,
    with_matching_descendants,
)
from .render.sink import UnknownColumnError, render_items, render_sections, render_tree

_LOGGER = get_logger("cli")

MANIFEST_SOURCE = "manifest"

TagLister = Callable[[RenderablePackage, str], Sequence[Renderable]]

# Member listings scoped to one tag: command -> (aliases, title, accessor)
_TAG_LISTINGS: Dict[str, tuple[list[str], str, TagLister]] = {
    "attributes": (["attrs"], "Attributes", RenderablePackage.tag_attributes),
    "slots": ([], "Slots", RenderablePackage.tag_slots),
    "events": ([], "Events", RenderablePackage.tag_events),
    "methods": ([], "Methods", RenderablePackage.tag_methods),
    "css-custom-properties": (
        ["css-properties", "css-props"],
        "CSS Properties",
        RenderablePackage.tag_css_properties,
    ),
    "css-custom-states": (["css-states"], "CSS States", RenderablePackage.tag_css_states),
    "css-parts": (["parts"], "CSS Parts", RenderablePackage.tag_css_parts),
}


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_list_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False, tag: bool = False
) -> None:
    def _default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    parser.add_argument(
        "-c",
        "--columns",
        action="append",
        default=_default(None),
        help="Columns to show, comma separated or repeated (case-insensitive).",
    )
    parser.add_argument(
        "--deprecated",
        action="store_true",
        default=_default(None),
        help="Only show deprecated items (and, in tree format, their ancestors).",
    )
    if tag:
        parser.add_argument(
            "-t",
            "--tag-name",
            required=True,
            help="Custom element tag name to list members of.",
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cemview",
        description="Inspect and query custom elements manifests.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument("--log-file", type=Path, help="Also write log records to this file.")
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .cemview.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "-m",
        "--manifest",
        help="Manifest file or package directory (overrides the config file).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List manifest contents as tables or a tree.")
    _add_verbose_option(list_parser, suppress_default=True)
    _add_list_options(list_parser)
    list_parser.add_argument(
        "-f",
        "--format",
        choices=LIST_FORMATS,
        default=None,
        help="Output format for the whole-manifest listing.",
    )
    list_subparsers = list_parser.add_subparsers(dest="list_command")

    tags_parser = list_subparsers.add_parser("tags", help="List custom element tag names.")
    _add_list_options(tags_parser, suppress_default=True)
    modules_parser = list_subparsers.add_parser("modules", help="List modules and their tags.")
    _add_list_options(modules_parser, suppress_default=True)
    for command, (aliases, title, _) in _TAG_LISTINGS.items():
        member_parser = list_subparsers.add_parser(
            command, aliases=aliases, help=f"List {title.lower()} of one custom element."
        )
        member_parser.set_defaults(list_command=command)
        _add_list_options(member_parser, suppress_default=True, tag=True)

    query_parser = subparsers.add_parser(
        "query", help="Resolve a path expression against the decoded manifest."
    )
    _add_verbose_option(query_parser, suppress_default=True)
    query_parser.add_argument("source", help=f"Data source name ('{MANIFEST_SOURCE}' or 'args').")
    query_parser.add_argument("path", help="Dotted/bracketed path, e.g. modules.0.path.")
    query_parser.add_argument("--filter", help="Post-resolution filter: first, count or exists.")
    query_parser.add_argument(
        "--arg",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Value substituted for $.KEY in the path.",
    )

    dump_parser = subparsers.add_parser(
        "dump", help="Re-serialise the decoded manifest as JSON."
    )
    _add_verbose_option(dump_parser, suppress_default=True)
    dump_parser.add_argument("--indent", type=int, default=2, help="Indentation width.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Bind address.")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for cemview commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
        if args.command == "serve":
            _run_serve(args, config)
            return
        package = _load_package(args, config)
        if args.command == "list":
            output = _run_list(args, config, package)
        elif args.command == "query":
            output = _run_query(args, package)
        elif args.command == "dump":
            output = encode_package(package, indent=args.indent) + "\n"
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (ConfigError, ManifestError, QueryError, UnknownColumnError) as exc:
        parser.exit(1, f"cemview {args.command} failed: {exc}\n")
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")

    sys.stdout.write(output)


def _load_package(args: argparse.Namespace, config: CemViewConfig) -> Package:
    if args.manifest:
        return load_manifest(Path(args.manifest))
    return load_manifest(config.manifest or config.root)


def _split_columns(values: Sequence[str] | None) -> List[str]:
    columns: List[str] = []
    for value in values or []:
        columns.extend(part.strip() for part in value.split(",") if part.strip())
    return columns


def _run_list(args: argparse.Namespace, config: CemViewConfig, package: Package) -> str:
    renderable = RenderablePackage(package)
    color = sys.stdout.isatty()
    explicit = _split_columns(getattr(args, "columns", None))
    columns = explicit or config.list.columns
    deprecated = getattr(args, "deprecated", None)
    only_deprecated = config.list.deprecated if deprecated is None else bool(deprecated)
    item_filter: Predicate = is_deprecated if only_deprecated else everything

    command = getattr(args, "list_command", None)
    if command is None:
        fmt = args.format or config.list.format
        if fmt == "tree":
            predicate = with_matching_descendants(is_deprecated) if only_deprecated else everything
            return render_tree(None, renderable.to_tree_node(predicate), color=color)
        return render_sections(renderable, item_filter, columns, color=color)

    if command == "tags":
        items: Sequence[Renderable] = renderable.custom_elements()
        title = "Custom Elements"
    elif command == "modules":
        items = renderable.modules()
        title = "Modules"
    else:
        _, title, lister = _TAG_LISTINGS[command]
        items = lister(renderable, args.tag_name)
        title = f"{title} of <{args.tag_name}>"

    items = [item for item in items if item_filter(item)]
    if not items:
        _LOGGER.info("Nothing to list")
        return ""
    return render_items(title, items, columns, strict=bool(explicit), color=color)


def _run_query(args: argparse.Namespace, package: Package) -> str:
    query_args: Dict[str, str] = {}
    for item in args.arg:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise QueryError(f"Expected KEY=VALUE for --arg, got '{item}'")
        query_args[key] = value
    sources = {MANIFEST_SOURCE: package.to_dict(), "args": query_args}
    result = PathQueryEngine().resolve_path_with_filter(
        sources, args.source, args.path, args.filter
    )
    return json.dumps(result, indent=2, ensure_ascii=False) + "\n"


def _run_serve(args: argparse.Namespace, config: CemViewConfig) -> None:
    from .service.app import run_service

    package = _load_package(args, config)
    run_service(
        host=args.host or config.service.host,
        port=args.port or config.service.port,
        package_factory=lambda: package,
    )


if __name__ == "__main__":
    main(sys.argv[1:])
