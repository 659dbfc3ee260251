from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import yaml

DEFAULT_OUTPUT = "openapi/tally-xml-service.yaml"


def _write_yaml(path: str, obj: dict) -> None:
    Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False, allow_unicode=False)


def _document_xml_responses(schema: dict) -> None:
    """Conversion routes return XML; advertise that instead of an empty JSON body."""
    for path, operations in schema.get("paths", {}).items():
        if not path.startswith("/v1/convert/"):
            continue
        for operation in operations.values():
            ok = operation.get("responses", {}).get("200")
            if ok is not None:
                ok["content"] = {"application/xml": {"schema": {"type": "string"}}}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Write the service OpenAPI schema as YAML")
    parser.add_argument("--output", default=DEFAULT_OUTPUT)
    args = parser.parse_args(argv)

    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "src"))

    # Import after adding src/ to sys.path (script can run without editable install).
    from tally_xml.service.main import app

    schema = app.openapi()
    _document_xml_responses(schema)
    _write_yaml(args.output, schema)


if __name__ == "__main__":
    main()
