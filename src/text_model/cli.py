"""
Command line tools for annotated text documents.

Validates documents and converts them between JSON and MessagePack.

Usage:
    python -m src.text_model.cli validate doc1.json doc2.json
    python -m src.text_model.cli convert doc.json doc.msgpack --to msgpack
    python -m src.text_model.cli convert doc.msgpack doc.json --to json --indent 2
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from src.text_model.annotated_text import AnnotatedText
from src.text_model.codec import ModelMapper
from src.text_model.config import MapperConfig
from src.text_model.types import ListAttribute

logger = logging.getLogger(__name__)

MSGPACK_SUFFIXES = {".msgpack", ".mpk"}


def read_document(mapper: ModelMapper, path: Path) -> AnnotatedText:
    """Read a document, choosing the format from the file suffix."""
    if path.suffix.lower() in MSGPACK_SUFFIXES:
        return mapper.from_msgpack(path.read_bytes())
    return mapper.read_value(path.read_text(encoding="utf-8"))


def write_document(mapper: ModelMapper, text: AnnotatedText, path: Path, fmt: str) -> None:
    if fmt == "msgpack":
        path.write_bytes(mapper.to_msgpack(text))
    else:
        path.write_text(mapper.write_value_as_string(text), encoding="utf-8")


def _layer_size(layer) -> int:
    return len(layer.items) if isinstance(layer, ListAttribute) else 1


def validate(mapper: ModelMapper, paths: List[Path]) -> int:
    """Decode every file; return the number of failures."""
    failures = 0
    for path in tqdm(paths, desc="Validating", unit="doc", disable=len(paths) < 2):
        try:
            text = read_document(mapper, path)
        except Exception as e:
            logger.error(f"✗ {path}: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
            failures += 1
            continue
        layers = ", ".join(f"{key}={_layer_size(layer)}" for key, layer in text.attributes.items())
        logger.info(f"✓ {path}: {len(text)} chars; layers: {layers or 'none'}")
    return failures


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate and convert annotated text documents"
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help="Reject layers under unknown attribute keys"
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Decode documents and report their layers")
    validate_parser.add_argument('files', type=Path, nargs='+', help="JSON or MessagePack documents")

    convert_parser = subparsers.add_parser("convert", help="Re-encode a document")
    convert_parser.add_argument('input', type=Path, help="Input document")
    convert_parser.add_argument('output', type=Path, help="Output document")
    convert_parser.add_argument(
        '--to',
        choices=["json", "msgpack"],
        default=None,
        help="Output format (default: from output suffix)"
    )
    convert_parser.add_argument(
        '--indent',
        type=int,
        default=None,
        help="Indentation for JSON output"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    config = MapperConfig(
        strict_attributes=args.strict,
        indent=getattr(args, "indent", None),
    )
    mapper = ModelMapper(config)

    if args.command == "validate":
        failures = validate(mapper, args.files)
        if failures:
            logger.error(f"{failures} of {len(args.files)} document(s) failed")
            return 1
        return 0

    fmt = args.to or ("msgpack" if args.output.suffix.lower() in MSGPACK_SUFFIXES else "json")
    try:
        text = read_document(mapper, args.input)
        write_document(mapper, text, args.output, fmt)
    except Exception as e:
        logger.error(f"✗ Conversion failed: {e}", exc_info=True)
        return 1
    logger.info(f"✓ {args.input} → {args.output} ({fmt})")
    return 0


if __name__ == '__main__':
    sys.exit(main())
