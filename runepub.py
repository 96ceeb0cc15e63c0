#!/usr/bin/env python3
"""
runepub — Convert a Projekt Runeberg book archive into an EPUB file.

Expects a typical 'titlekey-txt.zip' from https://runeberg.org (or the same
archive already unpacked into a directory).

Quick start:
  python runepub.py korkarlen-txt.zip
  python runepub.py -l drglas-txt.zip          # long output filename
  python runepub.py -f -o ~/Books drglas-txt.zip
"""

import argparse
import logging
import sys
from pathlib import Path

from errors import RunepubError
from models import Book


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a Projekt Runeberg book zip-file into an EPUB file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Default output filename: titlekey.epub

Environment (or .env):
  RUNEPUB_OUTPUT_DIR                 default for --output-dir
  RUNEPUB_MISSING_BLANK_FIRST_LINE   title keys whose pages lack the blank first line
        """,
    )
    parser.add_argument("source", type=Path, help="Runeberg zip-file or unpacked archive directory")
    parser.add_argument(
        "-l", "--long-name", action="store_true",
        help="Use long output filename, including author, title etc",
    )
    parser.add_argument(
        "-f", "--force", action="store_true",
        help="Overwrite existing output file",
    )
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=None, metavar="DIR",
        help="Directory to write the epub to (default: current directory)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log what the converter is doing",
    )
    return parser.parse_args(argv)


def output_filename(book: Book, long_name: bool = False) -> str:
    if not long_name:
        return f"{book.title_key}.epub"
    name = f"{book.author} - {book.title}"
    if book.year:
        name += f" ({book.year})"
    return name + f" [runeberg-{book.title_key}].epub"


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Lazy imports keep --help fast
    from archive import convert_archive
    from epub_builder import write_epub
    from settings import load_settings

    settings = load_settings()
    output_dir = args.output_dir or settings.output_dir

    try:
        book = convert_archive(args.source, heuristics=settings.heuristics)
    except RunepubError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Author: {book.author}")
    print(f"Title:  {book.title}")
    print(f"Lang:   {book.language}")
    if book.maybe_missing_blank_first_line:
        print("NOTE: Book maybe missing blank first line for new paragraph!")
    print(f"Sections: {';'.join(book.titles())}")

    output_path = output_dir / output_filename(book, args.long_name)
    if output_path.exists() and not args.force:
        print(f"ERROR: Output file {str(output_path)!r} exists", file=sys.stderr)
        return 1

    try:
        write_epub(book, output_path, progress=True)
    except RunepubError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
