"""Command line entry point for deckgraph.

Usage::

    # Summarise a deck: slides, masters, layouts and shapes
    deckgraph inspect deck.pptx --shapes

    # Show the effective font of a shape after inheritance
    deckgraph font deck.pptx --slide 1 --shape "Title 1"

    # Duplicate a shape in place
    deckgraph duplicate-shape deck.pptx --slide 2 --shape Logo -o out.pptx

    # Remove the second slide
    deckgraph remove-slide deck.pptx --slide 2 -o out.pptx

    # Copy slide 3 of one deck into another, at position 1
    deckgraph copy-slide source.pptx --slide 3 --into target.pptx --position 1 -o out.pptx
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from deckgraph.config import Settings, load_settings
from deckgraph.errors import DeckGraphError
from deckgraph.presentation import Presentation


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _settings(args) -> Settings:
    """Settings from --config, or the defaults."""
    if getattr(args, "config", None):
        path = Path(args.config)
        if not path.exists():
            _error(f"Config file not found: {path}")
        return load_settings(path)
    return Settings()


def _open(path, settings: Settings) -> Presentation:
    path = Path(path)
    if not path.exists():
        _error(f"Presentation not found: {path}")
    return Presentation.open(path, settings=settings)


def _slide(prs: Presentation, number: int):
    if not 1 <= number <= len(prs.slides):
        _error(f"Slide {number} out of range (deck has {len(prs.slides)})")
    return prs.slides.at(number)


def _shape(slide, name: str):
    shape = slide.shapes.get(name)
    if shape is None:
        names = ", ".join(repr(n) for n in slide.shapes.names())
        _error(f"No shape named {name!r} on slide {slide.number} (shapes: {names})")
    return shape


def _write(prs: Presentation, output) -> None:
    output = Path(output)
    prs.save(output)
    _info(f"Written: {output} ({output.stat().st_size:,} bytes)")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_inspect(args):
    """Show the structure of a presentation."""
    prs = _open(args.pptx, _settings(args))
    if args.json:
        print(json.dumps(prs.to_dict(), indent=2))
        return

    print(f"Slide size:  {prs.slide_width} x {prs.slide_height} EMU")
    print(f"Masters:     {len(prs.slide_masters)}")
    for master in prs.slide_masters:
        print(f"  {master.name or '(unnamed)'}: {len(master.layouts)} layout(s), "
              f"theme {master.theme.name!r}")
    print(f"Slides:      {len(prs.slides)}")
    for slide in prs.slides:
        hidden = " (hidden)" if slide.hidden else ""
        print(f"  [{slide.number:2d}] {slide.layout.name}{hidden}: {len(slide.shapes)} shape(s)")
        if args.shapes:
            for shape in slide.shapes:
                ph = f" ph={shape.placeholder.type.value}:{shape.placeholder.idx}" if shape.is_placeholder else ""
                print(f"       #{shape.id} {shape.name!r} {shape.kind.value}{ph}")


def cmd_font(args):
    """Show the effective font of a shape."""
    prs = _open(args.pptx, _settings(args))
    shape = _shape(_slide(prs, args.slide), args.shape)
    resolved = prs.resolver.resolve_font(shape, args.level)
    own = prs.resolver.own_font_data(shape, args.level)
    print(f"Shape:     {shape.name!r} (level {args.level})")
    for name, value in resolved.to_dict().items():
        source = "own" if getattr(own, name) is not None else "inherited"
        print(f"  {name:<9} {value}  [{source}]")


def cmd_duplicate_shape(args):
    """Duplicate a shape on its slide."""
    prs = _open(args.pptx, _settings(args))
    shape = _shape(_slide(prs, args.slide), args.shape)
    copy = shape.duplicate()
    _info(f"Duplicated {shape.name!r} as {copy.name!r} (id {copy.id})")
    _write(prs, args.output)


def cmd_remove_slide(args):
    """Remove a slide."""
    prs = _open(args.pptx, _settings(args))
    _slide(prs, args.slide)
    plan = prs.slides.remove(args.slide)
    if args.verbose:
        for line in plan.describe():
            _info(line)
    _info(f"Removed slide {args.slide}; {len(prs.slides)} slide(s) left")
    if not len(prs.slides):
        _warn("The presentation has no slides left")
    _write(prs, args.output)


def cmd_copy_slide(args):
    """Copy a slide of one presentation into another."""
    settings = _settings(args)
    source = _open(args.pptx, settings)
    target = _open(args.into, settings) if args.into else source
    slide = _slide(source, args.slide)
    if args.position is not None:
        copied = target.slides.insert(args.position, slide)
    else:
        copied = target.slides.add(slide)
    _info(f"Copied slide {args.slide} to position {copied.number}")
    _write(target, args.output)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="deckgraph",
        description="Inspect and edit .pptx presentations.",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML settings file.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Log debug output.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- inspect ----
    insp = subparsers.add_parser(
        "inspect",
        help="Show slides, masters and layouts of a presentation.",
    )
    insp.add_argument("pptx", help="Presentation to inspect.")
    insp.add_argument(
        "--shapes",
        action="store_true",
        default=False,
        help="List the shapes of every slide.",
    )
    insp.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the structure as JSON.",
    )
    insp.set_defaults(func=cmd_inspect)

    # ---- font ----
    font = subparsers.add_parser(
        "font",
        help="Show the effective font of a shape.",
    )
    font.add_argument("pptx", help="Presentation to read.")
    _add_shape_args(font)
    font.add_argument(
        "--level",
        type=int,
        choices=range(0, 9),
        metavar="0-8",
        default=0,
        help="Outline level (default: 0).",
    )
    font.set_defaults(func=cmd_font)

    # ---- duplicate-shape ----
    dup = subparsers.add_parser(
        "duplicate-shape",
        help="Duplicate a shape on its slide.",
    )
    dup.add_argument("pptx", help="Presentation to edit.")
    _add_shape_args(dup)
    _add_output_arg(dup)
    dup.set_defaults(func=cmd_duplicate_shape)

    # ---- remove-slide ----
    rem = subparsers.add_parser(
        "remove-slide",
        help="Remove a slide.",
    )
    rem.add_argument("pptx", help="Presentation to edit.")
    rem.add_argument("--slide", type=int, required=True, help="1-based slide number.")
    _add_output_arg(rem)
    rem.set_defaults(func=cmd_remove_slide)

    # ---- copy-slide ----
    cp = subparsers.add_parser(
        "copy-slide",
        help="Copy a slide within a presentation or into another one.",
    )
    cp.add_argument("pptx", help="Presentation holding the slide.")
    cp.add_argument("--slide", type=int, required=True, help="1-based slide number.")
    cp.add_argument(
        "--into",
        help="Presentation to copy into (default: the source itself).",
    )
    cp.add_argument(
        "--position",
        type=int,
        help="1-based position of the copy (default: append).",
    )
    _add_output_arg(cp)
    cp.set_defaults(func=cmd_copy_slide)

    return parser


def _add_shape_args(parser):
    """Add --slide / --shape args to a subparser."""
    parser.add_argument("--slide", type=int, required=True, help="1-based slide number.")
    parser.add_argument("--shape", required=True, help="Shape name.")


def _add_output_arg(parser):
    parser.add_argument(
        "-o", "--output",
        required=True,
        help="Output PPTX file path.",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except FileNotFoundError as exc:
        _error(f"File not found: {exc}")
    except DeckGraphError as exc:
        _error(str(exc))


if __name__ == "__main__":
    main()
