import argparse
import json
import sys
from pathlib import Path

from tabexport.config.logging_config import setup_logging
from .exporters import EXPORTERS
from .payload import records_from_payload


def _options(args) -> dict:
    opts = {"print_header": not args.no_header}
    if args.date_format:
        opts["date_format"] = args.date_format
    if args.format == "csv" and args.separator is not None:
        opts["separator"] = args.separator
    if args.format in ("xlsx", "excel_xml") and args.sheet_name:
        opts["sheet_name"] = args.sheet_name
    if args.format == "pdf" and args.page_size:
        opts["page_size"] = args.page_size
    return opts


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="python -m tabexport.exports.cli",
                                     description="Export a JSON record payload to a tabular format.")
    parser.add_argument("format", choices=sorted(EXPORTERS))
    parser.add_argument("payload", help="JSON file with 'columns' and 'records' ('-' for stdin)")
    parser.add_argument("-o", "--output", help="output file (default: stdout)")
    parser.add_argument("--separator")
    parser.add_argument("--sheet-name")
    parser.add_argument("--page-size")
    parser.add_argument("--date-format")
    parser.add_argument("--columns", help="comma-separated field names to include")
    parser.add_argument("--no-header", action="store_true")
    parser.add_argument("--log-level")
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        text = sys.stdin.read() if args.payload == "-" else Path(args.payload).read_text(encoding="utf-8")
        record_type, records = records_from_payload(json.loads(text))
    except (OSError, ValueError) as e:  # PayloadError and JSONDecodeError are ValueErrors
        print(f"error: {e}", file=sys.stderr)
        return 2

    opts = _options(args)
    if args.columns:
        opts["columns_to_print"] = [c.strip() for c in args.columns.split(",") if c.strip()]
    payload, diagnostic = EXPORTERS[args.format](records, record_type=record_type, **opts)
    if diagnostic:
        print(diagnostic, file=sys.stderr)
        return 1
    if args.output:
        Path(args.output).write_bytes(payload)
    else:
        sys.stdout.buffer.write(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
