"""CLI entry point for the synthetic metrics generator.

Usage:
    risk-generate --seed 42 --count 100
    risk-generate --config generators/configs/default_metrics.yaml --condition diabetes --score
    risk-generate --count 1000 --output file --output-file output/metrics.jsonl
"""

import argparse
import json
import sys
from pathlib import Path

import yaml

from src.domains.risk.models import Condition
from src.domains.risk.scoring import compute_risk
from src.shared.logging import setup_logging

from .metrics_generator import MetricsGenerator


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Synthetic patient metrics generator")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--count", type=int, default=100, help="Number of patient records")
    parser.add_argument(
        "--condition",
        type=str,
        default=None,
        choices=[c.value for c in Condition],
        help="Generate records for a single condition only",
    )
    parser.add_argument(
        "--score", action="store_true", help="Attach the computed risk score to each record"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="stdout",
        choices=["stdout", "file"],
        help="Output destination",
    )
    parser.add_argument("--output-file", type=str, default=None, help="Output file path")
    parser.add_argument(
        "--log-level", type=str, default="WARNING", help="Log level; logs share stdout"
    )

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    config: dict = {}
    if args.config:
        with open(args.config) as f:
            config = yaml.safe_load(f) or {}

    gen = MetricsGenerator(config=config, seed=args.seed)
    records = gen.generate(num_patients=args.count, condition=args.condition)

    if args.score:
        for record in records:
            record["score"] = compute_risk(record["condition"], record["metrics"])

    if args.output == "stdout":
        for record in records:
            print(json.dumps(record, default=str))
    elif args.output == "file":
        output_path = args.output_file or "output/metrics.jsonl"
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            for record in records:
                f.write(json.dumps(record, default=str) + "\n")
        print(f"Wrote {len(records)} records to {output_path}", file=sys.stderr)

    print(f"Generated {len(records)} records", file=sys.stderr)
