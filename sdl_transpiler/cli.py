"""Command line entry point for transpiling schema files."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import yaml

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.errors import SchemaError
from sdl_transpiler.load_config import load_config, transpiler_from_config
from sdl_transpiler.serializer import declaration_to_dict

logger = logging.getLogger(__name__)


def render_ast(ast: list[Declaration], fmt: str) -> str:
    """Serialize resolved declarations as JSON or YAML."""
    data = [declaration_to_dict(d) for d in ast]
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def run_transpile(args: argparse.Namespace) -> int:
    """Transpile one schema file according to the parsed arguments."""
    schema_path: Path = args.schema
    if not schema_path.is_file():
        msg = f"Schema file not found: {schema_path}"
        raise SystemExit(msg)

    config = load_config(args.config)
    transpiler = transpiler_from_config(config)
    text = schema_path.read_text(encoding="utf-8")

    try:
        if args.ast:
            fmt = args.ast_format or config["output"].get("ast_format", "json")
            output = render_ast(transpiler.get_schema_ast(text), fmt)
        else:
            output = transpiler.transpile_schema(text)
    except SchemaError as e:
        logger.error("%s (%s)", e, schema_path)
        return 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output, encoding="utf-8")
        print(f"Wrote {args.output}")
    else:
        sys.stdout.write(output)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the transpiler."""
    ap = argparse.ArgumentParser(
        description="Transpile extended SDL (generics, inheritance) into standard SDL.",
    )
    ap.add_argument(
        "schema",
        type=Path,
        help="Path to the extended SDL schema file",
    )
    ap.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the result to this file instead of stdout",
    )
    ap.add_argument(
        "--ast",
        action="store_true",
        help="Emit the resolved declarations instead of SDL",
    )
    ap.add_argument(
        "--ast-format",
        choices=["json", "yaml"],
        help="Format of --ast output (default: from config, json)",
    )
    ap.add_argument(
        "--config",
        help="Path to configuration file",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run_transpile(args)


if __name__ == "__main__":
    raise SystemExit(main())
