#!/usr/bin/env python3
"""Crosspreview CLI - render SwiftUI view sources as HTML.

Usage:
    crosspreview <file.swift>                 # Write the HTML preview to stdout
    crosspreview <file.swift> -o preview.html # Write the HTML preview to a file
    crosspreview <file.swift> --tree          # Show the view tree as json
    crosspreview <file.swift> --lark          # Show the lark parse tree
"""

import argparse
import json
import logging
import pathlib
import sys

from lark import Token, Tree

import crosspreview


def prettylark(node, indent=0, show_positions=False, out=None):
    """Pretty-print a lark parse tree.

    More compact than lark's built-in pretty(), single token rules are
    shown on one line with their value.
    """
    out = out or sys.stdout
    prefix = "  " * indent

    if isinstance(node, Token):
        pos = f" @{node.line}:{node.column}" if show_positions else ""
        value = repr(node.value) if len(node.value) < 60 else repr(node.value[:57] + "...")
        print(f"{prefix}{node.type}: {value}{pos}", file=out)

    elif isinstance(node, Tree):
        pos = ""
        if show_positions and not node.meta.empty:
            pos = f" @{node.meta.line}:{node.meta.column}"

        if len(node.children) == 0:
            print(f"{prefix}{node.data}(){pos}", file=out)
        elif len(node.children) == 1 and isinstance(node.children[0], Token):
            value = repr(node.children[0].value)
            print(f"{prefix}{node.data}: {value}{pos}", file=out)
        else:
            print(f"{prefix}{node.data}:{pos}", file=out)
            for child in node.children:
                prettylark(child, indent + 1, show_positions, out)

    else:
        print(f"{prefix}??? {type(node).__name__}: {node!r}", file=out)


def show_lark(source, grammar, show_positions=False):
    """Print the lark tree for a source, returns the exit code."""
    try:
        provider = crosspreview.SyntaxProvider.load(grammar)
        tree = provider.parse(crosspreview.strip_comments(source))
    except crosspreview.PreviewError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    prettylark(tree, show_positions=show_positions)
    return 0


def show_tree(result):
    """Print the view tree and diagnostics as json."""
    data = result.to_dict()
    data["backend"] = result.backend
    print(json.dumps(data, indent=2))


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="crosspreview",
        description="Render a SwiftUI view declaration as an HTML preview")
    parser.add_argument("source",
        help="Swift source file to preview")
    parser.add_argument("--text", action="store_true",
        help="Treat source as the Swift text itself")
    parser.add_argument("-o", "--output", metavar="OUT",
        help="Write the HTML document to OUT instead of stdout")
    parser.add_argument("--tree", action="store_true",
        help="Show the parsed view tree as json instead of HTML")
    parser.add_argument("--lark", action="store_true",
        help="Show the lark parse tree of the structural parser")
    parser.add_argument("--pos", action="store_true",
        help="Show line:column positions in the lark tree")
    parser.add_argument("--backend", choices=crosspreview.BACKENDS, default="auto",
        help="Parser backend to use")
    parser.add_argument("--no-fallback", action="store_true",
        help="Report syntax provider failures instead of retrying with the fallback parser")
    parser.add_argument("--title", default="SwiftUI Preview",
        help="Title of the HTML document")
    parser.add_argument("-v", "--verbose", action="store_true",
        help="Log parser decisions to stderr")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.tree and args.lark:
        parser.error("--tree cannot be combined with --lark")

    if args.text:
        source = args.source
    else:
        filepath = pathlib.Path(args.source)
        try:
            source = filepath.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            parser.error(f"cannot read {args.source}: {err}")

    config = crosspreview.PreviewConfig.from_mapping({
        "backend": args.backend,
        "fallback_on_error": not args.no_fallback,
    })

    if args.lark:
        return show_lark(source, config.grammar, args.pos)

    result = crosspreview.parse(source, config=config)
    if args.tree:
        show_tree(result)
    else:
        document = crosspreview.render_document(result, title=args.title)
        if args.output:
            pathlib.Path(args.output).write_text(document, encoding="utf-8")
        else:
            sys.stdout.write(document)

    for message in result.errors:
        print(f"warning: {message}", file=sys.stderr)
    return 0 if result.root is not None else 1


if __name__ == "__main__":
    sys.exit(main())
