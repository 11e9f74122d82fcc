"""jsval-gen: generate Python code that rebuilds validators without parsing schemas"""

import argparse
import importlib
import logging
import sys
from pathlib import Path

from jsval.config.project import ProjectConfig
from jsval.core.constraints import JSVal
from jsval.core.errors import ConfigError, FormatFailure, GenerationError
from jsval.generators.manifest_gen import ManifestGenerator
from jsval.generators.program import Generator

logger = logging.getLogger(__name__)


def load_validators(target: str) -> list[JSVal]:
    """Resolve ``package.module:attribute`` to a list of validators"""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Target must look like 'package.module:attribute', got '{target}'")

    module = importlib.import_module(module_name)
    try:
        obj = getattr(module, attr)
    except AttributeError:
        raise ValueError(f"Module '{module_name}' has no attribute '{attr}'") from None

    if isinstance(obj, JSVal):
        return [obj]
    if isinstance(obj, (list, tuple)) and all(isinstance(v, JSVal) for v in obj):
        return list(obj)
    raise ValueError(f"'{target}' must be a JSVal or a list of JSVal, got {type(obj).__name__}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsval-gen",
        description="Generate Python code that rebuilds jsval validators",
    )
    parser.add_argument("target", help="Validators to generate, as package.module:attribute")
    parser.add_argument("--output", "-o", help="Output file path (default: config output or stdout)")
    parser.add_argument("--prefix", help="Module name used to qualify generated calls")
    parser.add_argument("--formatter", "-f", choices=["ast", "none"], help="Output formatter")
    parser.add_argument("--manifest", help="Also write a YAML manifest to this path")
    parser.add_argument("--config-dir", type=Path, help="Project directory holding .jsval/config.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    project = ProjectConfig(args.config_dir)
    overrides = {"prefix": args.prefix, "formatter": args.formatter}
    try:
        options = project.options(overrides)
        output = Path(args.output) if args.output else project.get_output_path()
    except ConfigError as e:
        for err in e.errors:
            print(f"{err.code} {err.path}: {err.message}", file=sys.stderr)
        return 1

    try:
        validators = load_validators(args.target)
    except (ImportError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        source = Generator(options).generate(validators)
    except FormatFailure as e:
        sys.stderr.write(e.raw_source)
        print(f"\nerror: {e}", file=sys.stderr)
        return 1
    except GenerationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(source)
        logger.info("Generated: %s", output)
    else:
        sys.stdout.write(source)

    if args.manifest:
        manifest_path = Path(args.manifest)
        manifest_path.write_text(ManifestGenerator(validators, options).generate())
        logger.info("Manifest: %s", manifest_path)

    return 0


def main_sync():
    sys.exit(main())


if __name__ == "__main__":
    main_sync()
