# src/ci_taskmap/cli/main.py
"""
Entry point de linha de comando.

Usage:
    ci-taskmap                       # DOT de ./.cirrus.yml em stdout
    ci-taskmap -o tasks.png          # imagem via `dot`
    ci-taskmap --reduce -o tasks.svg --format svg path/to/.cirrus.yml
    cat .cirrus.yml | ci-taskmap -

Exit codes:
    0  sucesso
    1  erro de configuração ou de grafo (referência não resolvida, ambígua, ...)
    2  uso inválido (argparse)
    3  falha de ferramenta externa (`tred`/`dot`)
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from ci_taskmap.core.config import ConfigError, load_document, parse_document
from ci_taskmap.core.errors import exception_to_payload
from ci_taskmap.core.exceptions import TaskMapException
from ci_taskmap.core.graph.task_graph import TaskGraph
from ci_taskmap.core.options import RenderOptions, load_options
from ci_taskmap.core.render.context import RenderContext
from ci_taskmap.core.render.emitter import GraphEmitter, RenderResult
from ci_taskmap.cli.git import GitCommandMetadata
from ci_taskmap.cli.pipeline import ExternalToolError, reduce_transitive, render_image

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_TOOL_ERROR = 3

DEFAULT_DOCUMENT = ".cirrus.yml"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ci-taskmap",
        description="Render the task dependency graph of a CI configuration as Graphviz DOT",
    )
    parser.add_argument(
        "config",
        nargs="?",
        default=DEFAULT_DOCUMENT,
        help=f"CI configuration file, or - for stdin (default: {DEFAULT_DOCUMENT})",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write an image here (via dot) instead of printing DOT to stdout",
    )
    parser.add_argument(
        "--format",
        dest="image_format",
        default=None,
        help="Image format passed to dot -T (default: png)",
    )
    parser.add_argument(
        "-r",
        "--reduce",
        action="store_true",
        default=False,
        help="Remove transitive edges with tred before layout",
    )
    parser.add_argument(
        "--options",
        default=None,
        help="YAML/JSON file with render options",
    )
    parser.add_argument(
        "--no-title",
        action="store_true",
        default=False,
        help="Omit the '<repo>: <branch> @ <rev>' title",
    )
    parser.add_argument("--repo", default=None, help="Repository name shown in the title")
    parser.add_argument("--branch", default=None, help="Branch name shown in the title")
    parser.add_argument("--rev", default=None, help="Revision shown in the title")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Treat dependency cycles as a fatal error",
    )
    parser.add_argument("-d", "--debug", action="store_true", default=False, help="Record debug events")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Print recorded events to stderr")
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    # None = não informado; a camada inferior prevalece
    return {
        "reduce": True if args.reduce else None,
        "debug": True if args.debug else None,
        "verbose": True if args.verbose else None,
        "title": False if args.no_title else None,
        "fail_on_cycle": True if args.strict else None,
        "image_format": args.image_format,
        "repo": args.repo,
        "branch": args.branch,
        "rev": args.rev,
    }


def _load(args: argparse.Namespace, stdin: TextIO) -> Dict[str, Any]:
    if args.config == "-":
        return parse_document(stdin.read())
    return load_document(args.config)


def _git_provider(args: argparse.Namespace, options: RenderOptions) -> Optional[GitCommandMetadata]:
    if not options.title or (options.repo and options.branch and options.rev):
        return None
    cwd = Path.cwd() if args.config == "-" else Path(args.config).resolve().parent
    return GitCommandMetadata(cwd)


def _report(result: RenderResult, options: RenderOptions, stderr: TextIO) -> None:
    for warning in result.warnings:
        print(f"warning: {warning['type']}: {warning['message']}", file=stderr)
    if options.verbose:
        for event in result.events:
            print(json.dumps(event, ensure_ascii=False, sort_keys=True), file=stderr)


def main(
    argv: Optional[List[str]] = None,
    *,
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
    stderr: TextIO = sys.stderr,
) -> int:
    args = parse_args(argv)

    try:
        options = load_options(args.options, _overrides(args))
        graph = TaskGraph.build(_load(args, stdin), options=options)
    except ConfigError as e:
        print(f"error: {e}", file=stderr)
        return EXIT_CONFIG_ERROR
    except TaskMapException as e:
        payload = exception_to_payload(e)
        print(f"error: {payload.type}: {payload.message}", file=stderr)
        if payload.hint:
            print(f"hint: {payload.hint}", file=stderr)
        return EXIT_CONFIG_ERROR

    ctx = RenderContext(
        render_id=f"render-{(graph.document_sha256 or 'stdin')[:12]}",
        debug=options.debug,
        meta={"source": args.config},
    )
    result = GraphEmitter(options, git=_git_provider(args, options)).render(graph, ctx=ctx)
    _report(result, options, stderr)

    try:
        if args.output:
            render_image(
                result.dot,
                args.output,
                image_format=options.image_format,
                reduce=options.reduce,
            )
        else:
            stdout.write(reduce_transitive(result.dot) if options.reduce else result.dot)
    except ExternalToolError as e:
        print(f"error: {e}", file=stderr)
        return EXIT_TOOL_ERROR

    return EXIT_OK
