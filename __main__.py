"""CLI entry point for sdui-tokens.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the core packages and turns their failures into
logged errors and non-zero exit codes.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from sdui.config import (
    EnvVar,
    get_client_version,
    get_environment,
    get_json_indent,
    get_log_level,
    get_schema_strategy,
    resolve_output_path,
)
from sdui.core import get_logger, setup_logging
from sdui.migration import MigrationEngine, MigrationError
from sdui.output import format_resolved_screen, render_token
from sdui.registry import TokenRegistry
from sdui.samples import build_sample, list_samples
from sdui.schema import STRATEGIES, SchemaDecodeError, SchemaDecoder, generate_schema
from sdui.screen import ResolutionStatus, ScreenPayload, ScreenResolver
from sdui.tokens import TokenDecodeError, decode_token, encode_token, walk

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# Helpers
# =============================================================================


def _read_json(path: Path) -> Any | None:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.error(f"Input file not found: {path}")
    except json.JSONDecodeError as e:
        logger.error(f"Malformed JSON in {path}: {e}")
    return None


def _write_text(path: Path, text: str) -> Path:
    target = resolve_output_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    return target


def _write_json(path: Path, data: Any) -> Path:
    return _write_text(path, json.dumps(data, indent=get_json_indent()) + "\n")


def _infer_enabled(flag: bool) -> bool:
    return flag or get_environment(EnvVar.SDUI_INFER_TOKEN_TYPE)


# =============================================================================
# Generate Command
# =============================================================================


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    try:
        token = build_sample(args.type)
    except KeyError:
        logger.error(f"Unknown component type: {args.type}")
        logger.info(f"Available types: {', '.join(list_samples())}")
        return 1

    target = _write_json(args.output, encode_token(token))
    logger.info(f"Generated {args.type} to {target}")
    return 0


def handle_generate_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . generate",
        description="Generate JSON for a canned component",
    )
    parser.add_argument("type", help=f"Component type ({', '.join(list_samples())})")
    parser.add_argument("output", type=Path, help="Output JSON file")
    return cmd_generate(parser.parse_args(argv))


# =============================================================================
# Schema Command
# =============================================================================


def cmd_schema(args: argparse.Namespace) -> int:
    """Handle the schema command."""
    strategy = get_schema_strategy(args.strategy)
    schema = generate_schema(strategy)
    target = _write_json(args.output, schema)
    logger.info(f"Generated schema ({strategy}) to {target}")
    return 0


def handle_schema_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . schema",
        description="Generate the JSON Schema for all token types",
    )
    parser.add_argument("output", type=Path, help="Output schema file")
    parser.add_argument(
        "--strategy",
        "-s",
        choices=STRATEGIES,
        default=None,
        help="Generation strategy (default: SDUI_SCHEMA_STRATEGY or metadata)",
    )
    return cmd_schema(parser.parse_args(argv))


# =============================================================================
# Render Command
# =============================================================================


def cmd_render(args: argparse.Namespace) -> int:
    """Handle the render command."""
    data = _read_json(args.input)
    if data is None:
        return 1

    decoder = SchemaDecoder(infer_missing_type=_infer_enabled(args.infer))
    try:
        token = decoder.decode(data)
    except SchemaDecodeError as e:
        logger.error(f"Cannot render {args.input}:")
        for error in e.errors:
            logger.error(f"  {error.path}: {error.message}")
        return 1

    output = render_token(token, indent=get_json_indent())
    target = _write_text(args.output, output.to_text())
    logger.info(f"Rendered {token.id} to {target}")
    return 0


def handle_render_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . render",
        description="Decode a token document and write its tree and normalised JSON",
    )
    parser.add_argument("input", type=Path, help="Input token JSON file")
    parser.add_argument("output", type=Path, help="Output text file")
    parser.add_argument(
        "--infer",
        action="store_true",
        help="Infer the type of untagged tokens from their fields",
    )
    return cmd_render(parser.parse_args(argv))


# =============================================================================
# Migrate Command
# =============================================================================


def cmd_migrate(args: argparse.Namespace) -> int:
    """Handle the migrate command."""
    target_version = get_environment(EnvVar.SDUI_TARGET_VERSION, args.target)
    if target_version is None:
        logger.error("Target version is required (argument or SDUI_TARGET_VERSION)")
        return 1

    data = _read_json(args.input)
    if data is None:
        return 1

    logger.info(f"Migrating {args.input} to version {target_version}...")
    try:
        migrated = MigrationEngine().migrate_json(
            data, target_version, infer_missing_type=_infer_enabled(args.infer)
        )
    except MigrationError as e:
        logger.error(f"Migration failed: {e}")
        return 1

    if migrated is None:
        logger.error(
            f"Failed to migrate token from {args.input} to version {target_version}"
        )
        return 1

    target = _write_json(args.output, migrated)
    logger.info(f"Migrated token to version {target_version} and saved to {target}")
    return 0


def handle_migrate_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . migrate",
        description="Migrate a token document to a target version",
    )
    parser.add_argument("input", type=Path, help="Input token JSON file")
    parser.add_argument("output", type=Path, help="Output JSON file")
    parser.add_argument(
        "target",
        type=int,
        nargs="?",
        default=None,
        help="Target version (default: SDUI_TARGET_VERSION)",
    )
    parser.add_argument(
        "--infer",
        action="store_true",
        help="Infer the type of untagged tokens from their fields",
    )
    return cmd_migrate(parser.parse_args(argv))


# =============================================================================
# Validate Command
# =============================================================================


def _load_document(
    data: Any, infer: bool
) -> tuple[list[Any], list[ScreenPayload]] | None:
    """Split a document into decoded tokens and screen payloads.

    Accepts a single token object or ``{"tokens": [...], "screens": [...]}``.
    """
    if isinstance(data, dict) and ("tokens" in data or "screens" in data):
        raw_tokens = data.get("tokens", [])
        raw_screens = data.get("screens", [])
    else:
        raw_tokens = [data]
        raw_screens = []

    try:
        tokens = [decode_token(t, infer_missing_type=infer) for t in raw_tokens]
        screens = [ScreenPayload.model_validate(s) for s in raw_screens]
    except TokenDecodeError as e:
        logger.error(f"Cannot decode token: {e}")
        return None
    except ValueError as e:
        logger.error(f"Cannot decode screen payload: {e}")
        return None
    return tokens, screens


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    data = _read_json(args.input)
    if data is None:
        return 1

    loaded = _load_document(data, _infer_enabled(args.infer))
    if loaded is None:
        return 1
    tokens, screens = loaded

    registry = TokenRegistry()
    for token in tokens:
        if args.register_children:
            registry.register_all(walk(token))
        else:
            registry.register(token)

    findings = registry.validate_registry()
    for screen in screens:
        for missing in registry.validate_screen_payload(screen):
            findings.append(f"Screen '{screen.id}' references missing token '{missing}'")

    stats = registry.get_registration_stats()
    print(f"Registered {stats.total_tokens} token(s)")
    for token_type, count in sorted(stats.tokens_by_variant.items()):
        print(f"  {token_type}: {count}")

    resolver = ScreenResolver(registry, client_version=get_client_version())
    for screen in screens:
        resolved = resolver.resolve(screen)
        print()
        print(format_resolved_screen(resolved))
        findings.extend(
            issue.message
            for issue in resolved.issues
            if issue.kind is ResolutionStatus.INCOMPATIBLE
        )

    if findings:
        print()
        print(f"{len(findings)} problem(s) found:")
        for finding in findings:
            print(f"  - {finding}")
        return 1

    print("\nNo problems found")
    return 0


def handle_validate_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . validate",
        description="Register a token document and report integrity problems",
    )
    parser.add_argument("input", type=Path, help="Token or registry document")
    parser.add_argument(
        "--infer",
        action="store_true",
        help="Infer the type of untagged tokens from their fields",
    )
    parser.add_argument(
        "--register-children",
        action="store_true",
        help="Also register every nested child under its own ID",
    )
    return cmd_validate(parser.parse_args(argv))


# =============================================================================
# Entry point
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\nCommands:")
    print("  generate <type> <output>               Generate JSON for a component")
    print("  schema <output> [--strategy]           Generate JSON Schema for all token types")
    print("  render <input> <output>                Render a token from JSON")
    print("  migrate <input> <output> [<version>]   Migrate a token to a specific version")
    print("  validate <input> [--register-children] Check a token or registry document")
    print("\nComponent Types:")
    for name in list_samples():
        print(f"  {name}")
    print("\nExamples:")
    print("  python . generate enhanced-card card.json")
    print("  python . schema schema.json --strategy explicit")
    print("  python . migrate card.json card.v2.json 2")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        show_help()
        return 1

    command = argv[0]
    rest_args = argv[1:]

    if command in ("-h", "--help", "help"):
        show_help()
        return 0

    commands = {
        "generate": handle_generate_command,
        "schema": handle_schema_command,
        "render": handle_render_command,
        "migrate": handle_migrate_command,
        "validate": handle_validate_command,
    }

    if command in commands:
        setup_logging(get_log_level())
        return commands[command](rest_args)

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
