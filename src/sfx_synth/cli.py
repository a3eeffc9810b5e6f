"""Command-line interface for sfx-synth."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np
import structlog
from pydantic import ValidationError

from sfx_synth.generator import Generator
from sfx_synth.models import Patch
from sfx_synth.randomize import PRESET_ALIASES, PRESETS, mutate, randomize, randomize_preset
from sfx_synth.validate import dump_patch, load_patch, validate_patch_data


def _load_patch(path: str) -> Patch:
    """Load and parse a patch JSON file."""
    return load_patch(Path(path).read_text())


def _configure_logging(verbose: bool) -> None:
    # Log events go to stderr; stdout carries patch JSON and summaries only
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _emit(patch: Patch, output: str | None) -> None:
    text = dump_patch(patch) + "\n"
    if output:
        Path(output).write_text(text)
    else:
        sys.stdout.write(text)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_random(args: argparse.Namespace) -> int:
    _emit(randomize(args.seed), args.output)
    return 0


def _cmd_preset(args: argparse.Namespace) -> int:
    _emit(randomize_preset(args.category, args.seed), args.output)
    return 0


def _cmd_mutate(args: argparse.Namespace) -> int:
    patch = _load_patch(args.file)
    _emit(mutate(patch, args.seed, args.amount), args.output)
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    # Read raw so out-of-range values are reported instead of clamped away
    data = json.loads(Path(args.file).read_text())
    if not isinstance(data, dict):
        print("error: patch file must contain a JSON object", file=sys.stderr)
        return 1
    errors = validate_patch_data(data)

    has_errors = any(e.severity == "error" for e in errors)
    has_warnings = any(e.severity == "warning" for e in errors)

    for err in errors:
        prefix = "warning" if err.severity == "warning" else "error"
        print(f"{prefix}: {err}", file=sys.stderr)

    if has_errors:
        return 1
    if has_warnings:
        print("valid (with warnings)")
    else:
        print("valid")
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    patch = _load_patch(args.file)
    samples = Generator(patch, seed=args.seed).render_all()
    peak = float(np.max(np.abs(samples))) if len(samples) else 0.0
    duration = len(samples) / patch.sample_rate
    print(
        f"rendered {len(samples)} samples ({duration:.3f} s at {patch.sample_rate} Hz), "
        f"peak {peak:.3f}"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the sfx-synth CLI."""
    parser = argparse.ArgumentParser(
        prog="sfx-synth",
        description="Generate, mutate, validate and render procedural sound effect patches.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log synthesis events to stderr"
    )
    sub = parser.add_subparsers(dest="command")

    # random
    p_random = sub.add_parser("random", help="Print a fully random patch")
    p_random.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    p_random.add_argument("-o", "--output", help="Write patch JSON to file")

    # preset
    p_preset = sub.add_parser("preset", help="Print a random patch from a preset category")
    p_preset.add_argument(
        "category",
        choices=sorted(set(PRESETS) | set(PRESET_ALIASES)),
        help="Preset category",
    )
    p_preset.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    p_preset.add_argument("-o", "--output", help="Write patch JSON to file")

    # mutate
    p_mutate = sub.add_parser("mutate", help="Print a mutated copy of a patch")
    p_mutate.add_argument("file", help="Patch JSON file")
    p_mutate.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    p_mutate.add_argument(
        "--amount", type=float, default=0.05, help="Mutation strength, 0..1 (default: 0.05)"
    )
    p_mutate.add_argument("-o", "--output", help="Write patch JSON to file")

    # validate
    p_validate = sub.add_parser("validate", help="Check a patch file without clamping it")
    p_validate.add_argument("file", help="Patch JSON file")

    # render
    p_render = sub.add_parser("render", help="Render a patch and print a summary")
    p_render.add_argument("file", help="Patch JSON file")
    p_render.add_argument("--seed", type=int, default=0, help="Noise seed (default: 0)")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if not args.command:
        parser.print_help(sys.stderr)
        return 1

    try:
        if args.command == "random":
            return _cmd_random(args)
        elif args.command == "preset":
            return _cmd_preset(args)
        elif args.command == "mutate":
            return _cmd_mutate(args)
        elif args.command == "validate":
            return _cmd_validate(args)
        elif args.command == "render":
            return _cmd_render(args)
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"error: invalid JSON: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"error: invalid patch: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0  # pragma: no cover


if __name__ == "__main__":
    sys.exit(main())
