"""CLI: halo-capture review, capture, prompts, serve, mcp, init, presets, config validate."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from ..config import load_config, validate_config
from ..presets import get_preset, list_presets
from ..types import HaloError

LOG_LEVELS = ["debug", "info", "warning", "error"]


def _get_provider(config):
    """Provider built on first use, so input errors surface before key errors."""
    from ..providers import LazyProvider
    return LazyProvider(config.provider)


def _read_input(path: str | None) -> str:
    if path:
        return Path(path).read_text()
    print("Reading conversation from stdin (Ctrl+D to end)...", file=sys.stderr)
    return sys.stdin.read()


def _fail(e: HaloError):
    print(f"{e.error}: {e.message}", file=sys.stderr)
    sys.exit(1)


def cmd_review(args):
    """Run a HALO review over a conversation JSON file."""
    from ..core.review import run_review
    from ..schemas import ReviewRequest, parse_model
    from ..token_counter import create_token_counter

    config = load_config(args.config)
    try:
        raw = json.loads(_read_input(args.input))
    except json.JSONDecodeError as e:
        print(f"Invalid JSON input: {e}", file=sys.stderr)
        sys.exit(1)

    # Accept either a request body or a bare list of turns
    if isinstance(raw, list):
        raw = {"conversation": raw, "settings": {"enabled": True}}
    if not isinstance(raw, dict) or not isinstance(raw.get("settings", {}), dict):
        print("Invalid JSON input: expected an object or a list of turns", file=sys.stderr)
        sys.exit(1)
    if args.custom_prompt:
        raw.setdefault("settings", {"enabled": True})["customPrompt"] = args.custom_prompt

    try:
        request = parse_model(ReviewRequest, raw)
        result = run_review(
            request.turns(),
            request.settings.to_settings(),
            _get_provider(config),
            config.review,
            max_reply_tokens=request.max_reply_tokens,
            token_counter=create_token_counter(config.token_counter),
        )
    except HaloError as e:
        _fail(e)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return
    meta = result.metadata
    print(result.analysis)
    print()
    print("-" * 40)
    print(f"Messages:   {meta.total_messages} ({meta.user_messages} user, "
          f"{meta.assistant_messages} assistant)")
    print(f"Emotions:   {meta.emotions_detected}")
    print(f"Tokens:     ~{meta.estimated_tokens:,}")
    if meta.truncated:
        print(f"Truncated:  {meta.dropped_messages} earlier messages omitted")


def cmd_capture(args):
    """Capture expertise from one input via a specialist agent."""
    from ..core.capture import capture_expertise
    from ..schemas import CaptureRequest, parse_model

    config = load_config(args.config)
    try:
        request = parse_model(CaptureRequest, {
            "user_input": args.text,
            "capture_type": args.type,
            "expertise_domain": args.domain,
            "location": args.location,
        })
        result = capture_expertise(
            request, _get_provider(config), config.capture.capture_max_tokens,
        )
    except HaloError as e:
        _fail(e)
    print(json.dumps(result.to_dict(), indent=2))


def cmd_prompts(args):
    """List method prompts or show one with placeholders filled."""
    from ..core.resolver import method_resolver
    from ..prompts.methods import METHOD_TITLES
    from ..schemas import UserInfo

    config = load_config(args.config)
    overrides = config.prompts.overrides
    action = getattr(args, "prompts_action", None) or "list"

    if action == "list":
        print(f"{'Key':<5} {'Source':<8} {'Method'}")
        print("-" * 50)
        for key, title in METHOD_TITLES.items():
            source = "custom" if overrides.get(key) else "default"
            print(f"{key:<5} {source:<8} {title}")

    elif action == "show":
        info = UserInfo(name=args.name, domain=args.domain, history=args.history)
        try:
            print(method_resolver().render(args.key, overrides, info.variables()))
        except HaloError as e:
            _fail(e)


def cmd_serve(args):
    """Start the HTTP API."""
    try:
        import uvicorn
        from ..api import create_app
    except ImportError:
        print("Run: pip install halo-capture[bridge]", file=sys.stderr)
        sys.exit(1)

    config = load_config(args.config)
    errors = validate_config(config)
    if errors:
        print("Config validation errors:", file=sys.stderr)
        for err in errors:
            print(f"  - {err}", file=sys.stderr)
        sys.exit(1)

    host = args.host or config.server.host
    port = args.port or config.server.port
    app = create_app(config=config)
    print(f"halo-capture API on {host}:{port} ({config.provider.provider}/{config.provider.model})")
    uvicorn.run(app, host=host, port=port, log_level=args.log_level)


def cmd_mcp(args):
    """Start the MCP server on stdio."""
    import os

    from ..config import CONFIG_ENV
    try:
        from ..mcp.server import main as mcp_main
    except ImportError:
        print("Run: pip install halo-capture[mcp]", file=sys.stderr)
        sys.exit(1)

    if args.config:
        os.environ[CONFIG_ENV] = str(Path(args.config).resolve())
    mcp_main()


def cmd_init(args):
    """Generate a config file from a preset."""
    preset = get_preset(args.preset)
    if preset is None:
        available = ", ".join(p.name for p in list_presets())
        print(f"Unknown preset: {args.preset}", file=sys.stderr)
        if available:
            print(f"Available presets: {available}", file=sys.stderr)
        sys.exit(1)

    output = Path.cwd() / "halo-capture.yaml"
    if output.exists() and not args.force:
        print(f"Config file already exists: {output}", file=sys.stderr)
        print("Use --force to overwrite.", file=sys.stderr)
        sys.exit(1)

    output.write_text(preset.template)
    print(f"Created {output}")
    print(f"Preset: {preset.name} ({preset.description})")
    print()
    print("Next steps:")
    for i, step in enumerate(preset.next_steps, 1):
        print(f"  {i}. {step}")


def cmd_presets(args):
    """List or show presets."""
    action = getattr(args, "presets_action", None) or "list"

    if action == "list":
        print(f"{'Name':<12} {'Description'}")
        print("-" * 60)
        for p in list_presets():
            print(f"{p.name:<12} {p.description}")

    elif action == "show":
        preset = get_preset(args.preset_name)
        if preset is None:
            available = ", ".join(p.name for p in list_presets())
            print(f"Unknown preset: {args.preset_name}", file=sys.stderr)
            print(f"Available: {available}", file=sys.stderr)
            sys.exit(1)
        print(yaml.safe_dump(preset.config_dict, sort_keys=False))


def cmd_config_validate(args):
    """Validate config file."""
    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        print("Config validation errors:")
        for err in errors:
            print(f"  - {err}")
        sys.exit(1)
    else:
        print("Config is valid.")
        print(f"  Provider: {config.provider.provider} ({config.provider.model})")
        print(f"  Token counter: {config.token_counter}")
        print(f"  Review budget: {config.review.total_budget_tokens:,} "
              f"(reserved {config.review.reserved_response_tokens:,})")
        print(f"  Prompt overrides: {len(config.prompts.overrides)}")


def main():
    parser = argparse.ArgumentParser(
        prog="halo-capture",
        description="Multi-method expertise capture with HALO conversation review",
    )
    parser.add_argument("--config", "-c", help="Path to config file")
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, default="warning", help="Logging verbosity",
    )

    subparsers = parser.add_subparsers(dest="command")

    # review
    review_parser = subparsers.add_parser("review", help="Run a HALO review on a conversation")
    review_parser.add_argument("--input", "-i", help="Input file (JSON request or list of turns)")
    review_parser.add_argument("--custom-prompt", help="Replace the analysis prompt")
    review_parser.add_argument("--json", action="store_true", help="Print the full result as JSON")

    # capture
    capture_parser = subparsers.add_parser("capture", help="Capture expertise from one input")
    capture_parser.add_argument("text", help="What the expert said")
    capture_parser.add_argument(
        "--type", "-t", default="orchestrator",
        help="orchestrator, narrative, questionnaire, simulation, or protocol",
    )
    capture_parser.add_argument("--domain", help="Expertise domain")
    capture_parser.add_argument("--location", help="Capture location")

    # prompts
    prompts_parser = subparsers.add_parser("prompts", help="List or render method prompts")
    prompts_sub = prompts_parser.add_subparsers(dest="prompts_action")
    prompts_sub.add_parser("list", help="List method keys and their prompt source")
    prompts_show_parser = prompts_sub.add_parser("show", help="Render a method prompt")
    prompts_show_parser.add_argument("key", help="Method key (1-4)")
    prompts_show_parser.add_argument("--name", help="Expert's name")
    prompts_show_parser.add_argument("--domain", help="Expert's field")
    prompts_show_parser.add_argument("--history", help="Expert's background")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", help="Bind host (default from config)")
    serve_parser.add_argument("--port", "-p", type=int, help="Bind port (default from config)")

    # mcp
    subparsers.add_parser("mcp", help="Start the MCP server on stdio")

    # init
    init_parser = subparsers.add_parser("init", help="Generate config from a preset")
    init_parser.add_argument("preset", help="Preset name (e.g. 'openai')")
    init_parser.add_argument("--force", action="store_true", help="Overwrite existing config")

    # presets
    presets_parser = subparsers.add_parser("presets", help="List or inspect config presets")
    presets_sub = presets_parser.add_subparsers(dest="presets_action")
    presets_sub.add_parser("list", help="List all available presets")
    presets_show_parser = presets_sub.add_parser("show", help="Show a preset's config as YAML")
    presets_show_parser.add_argument("preset_name", help="Preset name to show")

    # config validate
    config_parser = subparsers.add_parser("config", help="Config operations")
    config_sub = config_parser.add_subparsers(dest="config_command")
    config_sub.add_parser("validate", help="Validate config file")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "review":
        cmd_review(args)
    elif args.command == "capture":
        cmd_capture(args)
    elif args.command == "prompts":
        cmd_prompts(args)
    elif args.command == "serve":
        cmd_serve(args)
    elif args.command == "mcp":
        cmd_mcp(args)
    elif args.command == "init":
        cmd_init(args)
    elif args.command == "presets":
        cmd_presets(args)
    elif args.command == "config":
        if args.config_command == "validate":
            cmd_config_validate(args)
        else:
            print("Usage: halo-capture config validate")
            sys.exit(1)


if __name__ == "__main__":
    main()
