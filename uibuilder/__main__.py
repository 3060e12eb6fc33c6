import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

from uibuilder import (
    UIParseError,
    build_export_artifacts,
    normalize_records,
    parse_ui_source,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _write_or_print(content: str, path: Optional[str]) -> None:
    if not path:
        print(content, end="" if content.endswith("\n") else "\n")
        return
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    logger.info("Wrote %s", output_path)


def _load_strings(path: Optional[str]) -> Optional[Dict[str, str]]:
    if not path:
        return None
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise SystemExit(f"{path}: string table must be a JSON object")
    return {str(key): str(value) for key, value in data.items()}


def _run_export(args: argparse.Namespace) -> None:
    logger.info("Reading element tree from %s", args.path)
    data = json.loads(Path(args.path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise SystemExit(f"{args.path}: expected a JSON array of elements")
    roots = normalize_records(data)
    artifacts = build_export_artifacts(roots)

    if args.split:
        code = "\n".join(snippet.code for snippet in artifacts.snippets)
    else:
        code = artifacts.typescript_code
    _write_or_print(code, args.ts_out)
    if args.strings_out:
        _write_or_print(artifacts.strings_json + "\n", args.strings_out)


def _run_import(args: argparse.Namespace) -> None:
    logger.info("Parsing ParseUI source from %s", args.path)
    text = Path(args.path).read_text(encoding="utf-8")
    strings = _load_strings(args.strings)
    try:
        roots = parse_ui_source(text, strings=strings)
    except UIParseError as err:
        logger.error("Import failed (%s error)", err.kind)
        print(err.message, file=sys.stderr)
        raise SystemExit(1)
    params = [root.to_params() for root in roots]
    _write_or_print(json.dumps(params, indent=2) + "\n", args.json_out)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Convert UI element trees to and from ParseUI source")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    export_parser = sub.add_parser("export", help="Serialize a JSON element tree")
    export_parser.add_argument("path", help="Path to the JSON element tree")
    export_parser.add_argument("--ts-out", help="Write the TypeScript code to this path")
    export_parser.add_argument("--strings-out", help="Write the strings JSON to this path")
    export_parser.add_argument(
        "--split",
        action="store_true",
        help="Emit one declaration per root instead of a single combined call",
    )
    export_parser.set_defaults(handler=_run_export)

    import_parser = sub.add_parser("import", help="Parse ParseUI source into a JSON element tree")
    import_parser.add_argument("path", help="Path to the source containing ParseUI calls")
    import_parser.add_argument("--strings", help="Strings JSON used to resolve stringkeys references")
    import_parser.add_argument("--json-out", help="Write the JSON element tree to this path")
    import_parser.set_defaults(handler=_run_import)

    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    args.handler(args)


if __name__ == "__main__":
    main(sys.argv[1:])
