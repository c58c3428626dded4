"""Command-line entry point for Diet Planner."""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from diet_planner.app_logging import configure_logging
from diet_planner.config import Settings
from diet_planner.containers import AppContainer, build_container
from diet_planner.domain.diet import DietConfig, DietMode
from diet_planner.domain.errors import PlanGenerationError
from diet_planner.domain.profile import ActivityLevel, DietGoal, Gender
from diet_planner.domain.providers import BUILTIN_PROVIDER_IDS, CustomProvider
from diet_planner.services.export import format_plan_text, format_recipes_text
from diet_planner.services.metrics import compute_health_metrics
from diet_planner.services.prompts import build_weekly_plan_prompt

BANNER = "Diet Planner: weekly meal plans and shopping lists from your health profile"
NO_PROFILE_NOTE = (
    "No saved profile yet, using defaults. Set yours with `diet-planner profile`."
)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(prog="diet-planner", description=BANNER)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("metrics", help="show BMI, BMR, TDEE and target calories")
    _add_diet_arguments(
        subparsers.add_parser("prompt", help="print the prompt without calling a model")
    )
    plan_parser = subparsers.add_parser("plan", help="generate a weekly plan")
    _add_diet_arguments(plan_parser)
    plan_parser.add_argument(
        "--recipes", action="store_true", help="also print recipes"
    )
    plan_parser.add_argument(
        "--json", action="store_true", help="print the plan as JSON"
    )
    subparsers.add_parser("test-connection", help="check the selected provider")

    profile_parser = subparsers.add_parser("profile", help="show or update the profile")
    profile_parser.add_argument("--age", type=int)
    profile_parser.add_argument("--weight", type=float, help="kilograms")
    profile_parser.add_argument("--height", type=float, help="centimeters")
    profile_parser.add_argument("--gender", choices=[g.value for g in Gender])
    profile_parser.add_argument("--activity", choices=[a.value for a in ActivityLevel])
    profile_parser.add_argument("--goal", choices=[g.value for g in DietGoal])
    profile_parser.add_argument("--dislikes")

    provider_parser = subparsers.add_parser("provider", help="configure LLM providers")
    provider_parser.add_argument("--select", metavar="PROVIDER_ID")
    provider_parser.add_argument(
        "--set-key", nargs=2, metavar=("PROVIDER_ID", "API_KEY")
    )
    provider_parser.add_argument("--add-custom", metavar="PROVIDER_ID")
    provider_parser.add_argument("--name", default="")
    provider_parser.add_argument("--base-url", default="")
    provider_parser.add_argument("--model", default="")
    provider_parser.add_argument("--api-key", default="")
    return parser


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        print(BANNER)
        parser.print_help()
        return 0
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    return asyncio.run(_run(args, build_container(settings)))


async def _run(args: argparse.Namespace, container: AppContainer) -> int:
    try:
        return await _dispatch(args, container)
    except PlanGenerationError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 2
    finally:
        await container.close_resources()


async def _dispatch(  # noqa: PLR0911
    args: argparse.Namespace, container: AppContainer
) -> int:
    settings_service = container.settings_service
    if args.command == "profile":
        return _update_profile(args, container)
    if args.command == "provider":
        return _update_providers(args, container)

    if args.command != "test-connection" and not settings_service.has_profile():
        print(NO_PROFILE_NOTE, file=sys.stderr)
    profile = settings_service.load_profile()
    metrics = compute_health_metrics(profile)
    if args.command == "metrics":
        print(f"BMI: {metrics.bmi} ({metrics.bmi_category})")
        print(f"BMR: {metrics.bmr:.2f} kcal")
        print(f"TDEE: {metrics.tdee:.2f} kcal")
        print(f"Target: {metrics.target_calories} kcal/day")
        return 0
    if args.command == "test-connection":
        await container.planner_service.test_connection(
            settings_service.load_provider_settings()
        )
        print("Connection OK")
        return 0

    config = _diet_config(args)
    if args.command == "prompt":
        print(
            build_weekly_plan_prompt(
                profile, metrics, config, container.planner_service.prompt_options
            )
        )
        return 0

    result = await container.planner_service.generate_weekly_plan(
        profile, metrics, config, settings_service.load_provider_settings()
    )
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    if args.json:
        print(result.plan.model_dump_json(by_alias=True, indent=2))
        return 0
    print(format_plan_text(result.plan, profile, metrics))
    if args.recipes:
        print()
        print(format_recipes_text(result.plan))
    return 0


def _add_diet_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode", choices=[m.value for m in DietMode], default=DietMode.BUYING.value
    )
    parser.add_argument("--flavor", action="append", default=None)
    parser.add_argument("--staple", default="rice")
    parser.add_argument("--want", default="", help="ingredients you want to eat")
    parser.add_argument("--have", default="", help="ingredients you already have")
    parser.add_argument("--no-repetition", action="store_true")
    parser.add_argument("--max-ingredients", type=int, default=None)


def _diet_config(args: argparse.Namespace) -> DietConfig:
    return DietConfig(
        mode=DietMode(args.mode),
        flavor_preferences=args.flavor or ["light"],
        staple_preference=args.staple,
        wanted_ingredients=args.want,
        existing_ingredients=args.have,
        meal_prep_repetition=not args.no_repetition,
        max_ingredients=args.max_ingredients,
    )


def _update_profile(args: argparse.Namespace, container: AppContainer) -> int:
    service = container.settings_service
    updates = {
        "age": args.age,
        "weight": args.weight,
        "height": args.height,
        "gender": args.gender,
        "activity_level": args.activity,
        "goal": args.goal,
        "dislikes": args.dislikes,
    }
    changes = {key: value for key, value in updates.items() if value is not None}
    profile = service.load_profile()
    if changes:
        profile = profile.model_validate({**profile.model_dump(), **changes})
        service.save_profile(profile)
    print(profile.model_dump_json(indent=2))
    return 0


def _update_providers(args: argparse.Namespace, container: AppContainer) -> int:
    service = container.settings_service
    provider_settings = service.load_provider_settings()
    if args.set_key:
        provider_id, api_key = args.set_key
        if provider_id not in BUILTIN_PROVIDER_IDS:
            print(f"Unknown built-in provider: {provider_id}", file=sys.stderr)
            return 2
        provider_settings.builtin_api_keys[provider_id] = api_key.strip()
    if args.add_custom:
        custom = CustomProvider(
            id=args.add_custom,
            name=args.name,
            base_url=args.base_url,
            model=args.model,
            api_key=args.api_key,
        )
        provider_settings.custom_providers = [
            *(p for p in provider_settings.custom_providers if p.id != custom.id),
            custom,
        ]
    if args.select:
        provider_settings.selected_provider_id = args.select
    service.save_provider_settings(provider_settings)

    print(f"Selected provider: {provider_settings.selected_provider_id}")
    for provider_id in BUILTIN_PROVIDER_IDS:
        configured = bool(provider_settings.builtin_api_keys.get(provider_id))
        print(f"- {provider_id}: {'key set' if configured else 'no key'}")
    for custom in provider_settings.custom_providers:
        state = "complete" if custom.is_complete() else "incomplete"
        print(f"- {custom.id} ({custom.name or 'custom'}): {custom.base_url} [{state}]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
