from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from tally_xml.common.errors import InputValidationError, StructuralSerializationError
from tally_xml.common.logging import configure_logging, get_logger
from tally_xml.common.settings import get_settings
from tally_xml.flows import convert_mapping, convert_master, convert_voucher

log = get_logger("tally_xml.cli")

EXIT_INPUT_ERROR = 1
EXIT_VALIDATION_ERROR = 2


def _read_json(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    return json.loads(Path(source).read_text(encoding="utf-8"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tally-xml", description="Convert JSON to Tally import XML")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("master", "ledger masters JSON"),
        ("voucher", "voucher JSON (with optional units, ledgers and stock items)"),
        ("raw", "nested JSON object rendered as-is (.LIST keys become repeated elements)"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("input", help="JSON file, or - to read stdin")
        p.add_argument("-o", "--output", default=None, help="write XML to this file instead of stdout")
        if name == "raw":
            p.add_argument("--request-type", default=None, help="TALLYREQUEST value (default from settings)")

    serve = sub.add_parser("serve", help="run the HTTP conversion service")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def _convert(args: argparse.Namespace, payload: Any) -> str:
    settings = get_settings()
    if args.command == "master":
        return convert_master(payload, settings)
    if args.command == "voucher":
        return convert_voucher(payload, settings)
    return convert_mapping(payload, request_type=args.request_type, settings=settings)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=False, stream=sys.stderr)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("tally_xml.service.main:app", host=args.host, port=args.port)
        return 0

    try:
        payload = _read_json(args.input)
    except (OSError, json.JSONDecodeError) as e:
        print(f"error: cannot read {args.input}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        xml = _convert(args, payload)
    except InputValidationError as e:
        for line in e.errors:
            print(line, file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except (StructuralSerializationError, TypeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    if args.output:
        Path(args.output).write_text(xml, encoding="utf-8")
        log.info("xml_written", path=args.output)
    else:
        sys.stdout.write(xml)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
