"""
Command-line interface for LawQuill.

Usage:
    lawquill 129AC0000000089_20230401_504AC0000000018.xml -d minpo.epub
    lawquill law.xml -d law.epub --no-images
    lawquill law.xml -d law.epub --revision-id 129AC0000000089_20230401_504AC0000000018
"""

import argparse
import logging
import sys
from pathlib import Path

from .api import create_epub_from_path, write_epub
from .config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_MAX_IMAGE_HEIGHT,
    ConversionOptions,
    revision_id_from_path,
)
from .exceptions import LawQuillError
from .utils.rich_logger import setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lawquill",
        description="LawQuill - Japanese Standard Law XML to EPUB converter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lawquill 129AC0000000089_20230401_504AC0000000018.xml -d minpo.epub
  lawquill law.xml -d law.epub --no-images
  lawquill law.xml -d law.epub --max-image-height 60vh
        """,
    )
    parser.add_argument("source", help="Source law XML file")
    parser.add_argument("-d", "--dest", required=True, help="Destination EPUB file")
    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Do not download figures from the e-Gov API",
    )
    parser.add_argument(
        "--max-image-height",
        default=DEFAULT_MAX_IMAGE_HEIGHT,
        help=f"Maximum figure height as a CSS length (default: {DEFAULT_MAX_IMAGE_HEIGHT})",
    )
    parser.add_argument(
        "--revision-id",
        help="Law revision id used for attachment downloads (default: derived from the file name)",
    )
    parser.add_argument(
        "--api-base-url",
        default=DEFAULT_API_BASE_URL,
        help=f"Law API base URL (default: {DEFAULT_API_BASE_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Attachment download timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--no-title-page",
        action="store_true",
        help="Omit the generated title page",
    )
    return parser


def build_options(args) -> ConversionOptions:
    """Translate parsed arguments into conversion options."""
    download_images = not args.no_images
    revision_id = args.revision_id
    if download_images and not revision_id:
        revision_id = revision_id_from_path(args.source)
        if revision_id is None:
            print(
                f"Warning: cannot derive a revision id from {Path(args.source).name}, "
                "images will be skipped"
            )
            download_images = False

    return ConversionOptions(
        download_images=download_images,
        revision_id=revision_id,
        max_image_height=args.max_image_height,
        title_page=not args.no_title_page,
        api_base_url=args.api_base_url,
        request_timeout=args.timeout,
    )


def cmd_convert(args) -> int:
    """Handle the conversion."""
    options = build_options(args)
    try:
        book = create_epub_from_path(args.source, options)
        write_epub(book, args.dest)
    except LawQuillError as exc:
        print(f"Error: {exc}")
        return 1
    except Exception as exc:
        logger.exception("Unexpected failure while converting")
        print(f"Error: {exc}")
        return 1

    print(f"Successfully created EPUB: {args.dest}")
    return 0


def main(argv=None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    return cmd_convert(args)


if __name__ == "__main__":
    sys.exit(main())
