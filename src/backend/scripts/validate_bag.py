from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Check a bag (directory or zip) against the DANS BagIt profile and print the compliance report."
    )
    parser.add_argument("bag", help="Bag directory or zip file containing one bag directory.")
    parser.add_argument(
        "--context",
        choices=("data-station", "vaas"),
        default=None,
        help="Validation context (default: VALIDATE_BAG_CONTEXT or data-station).",
    )
    parser.add_argument(
        "--package-type",
        choices=("DEPOSIT", "MIGRATION"),
        default="DEPOSIT",
        help="Information package type (default: DEPOSIT).",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json", "yaml"),
        default="text",
        help="Output format (default: text).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every rule evaluation.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    _ensure_backend_on_path()
    from bag_validation.rules_engine.errors import RuleEngineConfigurationError
    from bag_validation.rules_engine.rule_sets import ValidationContext
    from pipelines.config import get_validation_config
    from pipelines.validation import (
        BagNotFoundError,
        InformationPackageType,
        build_service,
        render_json,
        render_text,
        render_yaml,
    )

    try:
        config = get_validation_config()
        if args.context:
            config = config.model_copy(update={"context": ValidationContext(args.context)})
        # Paths given on the command line are taken as-is.
        config = config.model_copy(update={"base_folder": None})
        service = build_service(config)
    except (RuleEngineConfigurationError, ValueError) as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2

    package_type = InformationPackageType(args.package_type)
    bag = Path(args.bag)
    # Rule errors propagate; only a missing bag is reported here.
    try:
        if bag.is_file() and bag.suffix.lower() == ".zip":
            report = service.validate_zip(bag.read_bytes(), package_type=package_type)
        else:
            report = service.validate_dir(bag, package_type=package_type, bag_location=args.bag)
    except BagNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    renderers = {"text": render_text, "json": render_json, "yaml": render_yaml}
    print(renderers[args.format](report))
    return 0 if report.is_compliant else 1


if __name__ == "__main__":
    raise SystemExit(main())
