#!/usr/bin/env python3
"""
Example of driving a documentation build from Python.

Loads examples/schemadoc.yaml, builds every page in memory, writes them to a
temporary directory and prints a short report.

Usage:
    python examples/build_docs.py
"""

import logging
import tempfile
from pathlib import Path

from config import load_config
from core.logging import setup_logging
from schemadoc.generator import build, check_outputs, write_outputs
from schemadoc.render.examples import component_example

EXAMPLES_DIR = Path(__file__).parent


def main():
    setup_logging(console_level=logging.WARNING)
    config = load_config(EXAMPLES_DIR / "schemadoc.yaml", required=True)

    result = build(config)
    print(f"Build {result.build_id}: {result.document_count} documents")
    for relative in result.documents:
        print(f"  {relative}")
    print()

    with tempfile.TemporaryDirectory() as temp_dir:
        output_dir = Path(temp_dir) / "docs"

        report = write_outputs(result, output_dir)
        print(f"First write: {len(report.written)} written, {len(report.unchanged)} unchanged")

        report = write_outputs(result, output_dir)
        print(f"Second write: {len(report.written)} written, {len(report.unchanged)} unchanged")

        problems = check_outputs(result, output_dir)
        print(f"Check: {'up to date' if not problems else problems}")
    print()

    print("Example configuration for the kafka sink:")
    print("-" * 70)
    print(component_example(result.schema.sinks["kafka"]), end="")


if __name__ == "__main__":
    main()
