"""Command line interface for the prompt generator.

Subcommands::

    generate  Analyse a description (or take --type) and render a prompt
    analyze   Show what the intent analyzer makes of a description
    preview   Show the first characters of a raw template body
    list      List the registered templates
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from src.config import Config
from src.prompts.engine import PromptEngine, build_context
from src.prompts.models import KNOWN_ARCHETYPES, SelectionContext, TemplateFeedback
from src.utils import (
    console,
    load_json_list,
    print_error,
    print_result,
    print_section_header,
    print_success,
    print_summary_table,
    print_templates_table,
    print_warning,
    sanitize_name,
    save_prompt,
)

EXPERIENCE_CHOICES = ("beginner", "intermediate", "expert")
PHASE_CHOICES = ("planning", "development", "optimization")


def _split(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptgen",
        description="Generate project guidance prompts from a description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            '  promptgen generate "online store with stripe checkout" --name ShopMaster\n'
            "  promptgen generate --type saas --features auth,billing -o prompt.md\n"
            "  promptgen preview blog\n"
            "  promptgen list\n"
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a JSON config file (defaults to PROMPTGEN_* environment variables)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Render a prompt")
    gen.add_argument("description", nargs="?", default="", help="Free-text project description")
    gen.add_argument("--type", dest="archetype", choices=KNOWN_ARCHETYPES, default=None,
                     help="Force the project type instead of detecting it")
    gen.add_argument("--name", default=None, help="Project name")
    gen.add_argument("--features", default=None, help="Comma-separated features to include")
    gen.add_argument("--tech", default=None, help="Comma-separated tech stack")
    gen.add_argument("--experience", choices=EXPERIENCE_CHOICES, default=None)
    gen.add_argument("--phase", choices=PHASE_CHOICES, default=None)
    gen.add_argument("--feedback", default=None,
                     help="JSON file with a list of template feedback entries")
    gen.add_argument("--output", "-o", default=None,
                     help="Write the prompt to this file instead of stdout")

    analyze = sub.add_parser("analyze", help="Analyse a project description")
    analyze.add_argument("description", help="Free-text project description")

    preview = sub.add_parser("preview", help="Preview a raw template body")
    preview.add_argument("archetype", help="Project type, e.g. ecommerce")

    sub.add_parser("list", help="List available templates")
    return parser


def _load_config(path: str | None) -> Config:
    if path:
        return Config.load(Path(path))
    return Config.from_env()


def _cmd_generate(engine: PromptEngine, config: Config, args: argparse.Namespace) -> int:
    if not args.description and not args.archetype:
        print_error("Provide a description or --type")
        return 1

    features = _split(args.features)
    tech = _split(args.tech) or None
    intent = engine.analyzer.analyze(args.description, features, tech)
    if args.archetype:
        intent = intent.model_copy(update={"archetype": args.archetype})

    if args.feedback and not Path(args.feedback).is_file():
        print_error(f"Feedback file not found: {args.feedback}")
        return 1

    try:
        entries = load_json_list(args.feedback) if args.feedback else []
        feedback = [TemplateFeedback(**entry) for entry in entries]
    except (OSError, ValueError, TypeError, ValidationError) as exc:
        print_error(f"Invalid feedback file {args.feedback}: {escape(str(exc))}")
        return 1

    project_name = args.name or f"my-{intent.archetype}-app"
    context = build_context(intent, project_name, engine.tool_version, tech_stack=tech)
    selection = SelectionContext(
        project_intent=intent,
        user_experience=args.experience or config.default_experience,
        development_phase=args.phase or config.default_phase,
        previous_feedback=feedback,
    )

    result = engine.generate(intent.archetype, context, selection)
    print_result(result)
    if not result.success:
        return 1

    if args.output:
        path = save_prompt(result.prompt or "", args.output)
        print_success(f"Prompt written to {path}")
    else:
        print_section_header(f"{sanitize_name(project_name)} prompt")
        console.out(result.prompt or "", highlight=False)
    return 0


def _cmd_analyze(engine: PromptEngine, args: argparse.Namespace) -> int:
    intent = engine.analyzer.analyze(args.description)
    valid, warnings = engine.analyzer.validate_intent(intent)
    print_summary_table(
        {
            "Project type": intent.archetype,
            "Confidence": f"{intent.confidence}%",
            "Features": ", ".join(intent.features) or "-",
            "Complexity": intent.complexity.value,
            "Tech": ", ".join(intent.tech_preferences) or "-",
        },
        title="Intent Analysis",
    )
    for warning in warnings:
        print_warning(warning)
    return 0 if valid else 1


def _cmd_preview(engine: PromptEngine, args: argparse.Namespace) -> int:
    text = engine.preview(args.archetype)
    if text is None:
        print_error(f"No template found for project type: {args.archetype}")
        return 1
    console.out(text, highlight=False)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``python -m src.cli`` and the ``promptgen`` script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args.config)
    except (OSError, ValueError) as exc:
        print_error(f"Could not load configuration: {exc}")
        return 1

    engine = PromptEngine.from_config(config)

    if args.command == "generate":
        return _cmd_generate(engine, config, args)
    if args.command == "analyze":
        return _cmd_analyze(engine, args)
    if args.command == "preview":
        return _cmd_preview(engine, args)
    print_templates_table(engine.list_templates())
    return 0


if __name__ == "__main__":
    sys.exit(main())
