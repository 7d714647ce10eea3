"""AutoLocale console tool.

Manages the translation files of an application: seeds the source language, adds new
languages with automatic AI translation, and reports translation progress and system health.

Run ``python localize.py --help`` for the list of commands.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final, NoReturn

from config.loader import ConfigLoader, ConfigLoaderError, apply_overrides, validate_config
from core.cli_service import CliService
from core.shared_data import SharedData
from core.version import VERSION
from models.config_models import Config
from models.error_models import TranslationError
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from models.recovery_models import ApiKeyValidationResult, SystemHealthStatus
    from models.translation_models import LanguageProgress

CFG_FILE: Final[str] = "autolocale.ini"
PROGRESS_STEP: Final[int] = 5

EXIT_OK: Final[int] = 0
EXIT_FAILURE: Final[int] = 1


def check_python_version() -> None:
    """Check if Python version is 3.12 or later.

    Raises:
        RuntimeError: If Python version is below 3.12.
    """
    if sys.version_info < (3, 12):
        msg = "Python 3.12 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="localize",
        description="Manage translation files with automatic AI translation",
        epilog='Example: python localize.py add-language fr "French"',
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--config", dest="config", metavar="FILE", default=CFG_FILE, help="Configuration file")
    parser.add_argument("--locales-dir", dest="locales_dir", metavar="DIR", help="Override the locales directory")
    parser.add_argument("--debug", dest="debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    init_parser = subparsers.add_parser("init", help="Create the source language file with starter texts")
    init_parser.add_argument(
        "--with", dest="with_languages", metavar="LANG", action="append", default=[], help="Also create LANG"
    )

    add_parser = subparsers.add_parser("add-language", help="Add a new language with automatic translation")
    add_parser.add_argument("code", metavar="CODE", help="Language code, e.g. fr or pt-BR")
    add_parser.add_argument("name", metavar="NAME", help="Language name, e.g. French")

    translate_parser = subparsers.add_parser("translate-all", help="Translate all keys from one language to another")
    translate_parser.add_argument("source", metavar="SOURCE", help="Source language code")
    translate_parser.add_argument("target", metavar="TARGET", help="Target language code")

    progress_parser = subparsers.add_parser("progress", help="Show translation progress for a language")
    progress_parser.add_argument("code", metavar="CODE", help="Language code")

    subparsers.add_parser("list", help="List all available languages")
    subparsers.add_parser("stats", help="Show translation statistics for all languages")
    subparsers.add_parser("health", help="Check the health of the translation system")
    subparsers.add_parser("validate-key", help="Check the AI service API key")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Load configuration file and apply CLI overrides.

    A missing configuration file is not an error here: the defaults are used instead.

    Args:
        args: Command-line arguments.

    Returns:
        Config: Configuration object.

    Raises:
        ConfigLoaderError: If the configuration file cannot be parsed or is invalid.
    """
    script_name: str = Path(sys.argv[0]).stem
    overrides: dict[str, object] = {"locales_dir": args.locales_dir, "debug": args.debug}
    if not Path(args.config).exists():
        print(f"Warning: configuration file '{args.config}' not found, using defaults.", file=sys.stderr)
        config = Config()
        config.GENERAL.SCRIPT_NAME = script_name
        apply_overrides(config, **overrides)
        validate_config(config)
        return config
    return ConfigLoader(config_filename=args.config, script_name=script_name, **overrides).config


def setup_logging(config: Config) -> None:
    log_file: str = str(FileUtils.resolve_path(config.GENERAL.LOG_FILE)) if config.GENERAL.LOG_FILE else ""
    LoggerUtils(log_file).set_level("DEBUG" if config.GENERAL.DEBUG else "INFO")


async def handle_init(cli: CliService, args: argparse.Namespace) -> int:
    await cli.init_locales(args.with_languages)
    return EXIT_OK


async def handle_add_language(cli: CliService, args: argparse.Namespace) -> int:
    code: str = args.code
    name: str = args.name
    print(f"Adding language: {name} ({code})")

    valid, suggestions = cli.validate_and_suggest(code)
    if not valid:
        print(f"Invalid language code: {code}", file=sys.stderr)
        if suggestions:
            print("Did you mean one of these?")
            for suggestion in suggestions:
                print(f"   {suggestion} - {cli.get_suggested_language_name(suggestion)}")
        return EXIT_FAILURE

    suggested_name: str | None = cli.get_suggested_language_name(code)
    if suggested_name and suggested_name != name:
        print(f"Suggested name for {code}: {suggested_name}")
        print(f"   You provided: {name}")

    await cli.add_language(code, name)
    return EXIT_OK


async def handle_translate_all(cli: CliService, args: argparse.Namespace) -> int:
    print(f"Translating all keys from {args.source} to {args.target}")
    last_progress: int = 0
    processed: int = 0
    async for progress in cli.translate_all_keys(args.source, args.target):
        processed += 1
        if progress.progress >= last_progress + PROGRESS_STEP or progress.progress == 100:
            cli.show_progress("Translation", progress.progress, f"Processed {processed} keys")
            last_progress = progress.progress
    return EXIT_OK


async def handle_progress(cli: CliService, args: argparse.Namespace) -> int:
    progress: LanguageProgress = await cli.get_translation_progress(args.code)
    percentage: int = round(progress.translated / progress.total * 100) if progress.total else 0
    print(f"\nTranslation Progress for {args.code}:")
    print(f"   Total keys: {progress.total}")
    print(f"   Translated: {progress.translated}")
    print(f"   Pending: {progress.pending}")
    print(f"   Progress: {percentage}%")
    cli.show_progress("Overall Progress", percentage)
    return EXIT_OK


async def handle_list(cli: CliService, _: argparse.Namespace) -> int:
    cli.display_available_languages()
    return EXIT_OK


async def handle_stats(cli: CliService, _: argparse.Namespace) -> int:
    await cli.display_translation_stats()
    return EXIT_OK


async def handle_health(shared_data: SharedData) -> int:
    health: SystemHealthStatus = await shared_data.recovery_service.get_system_health(refresh=True)
    print(f"\nSystem health: {health.overall.upper()}")
    print("-" * 50)
    for name, service in health.services.items():
        line: str = f"  {name:<12} {service.status}"
        print(f"{line} - {service.message}" if service.message else line)
    if health.issues:
        print("\nIssues:")
        for issue in health.issues:
            print(f"  [{issue.severity}] {issue.service}: {issue.message}")
            if issue.suggested_action:
                print(f"      -> {issue.suggested_action}")
    print("-" * 50)
    return EXIT_OK if health.overall != "critical" else EXIT_FAILURE


async def handle_validate_key(shared_data: SharedData) -> int:
    result: ApiKeyValidationResult = await shared_data.recovery_service.validate_api_key_configuration()
    print(f"\nAPI key configured: {'yes' if result.is_configured else 'no'}")
    print(f"API key valid: {'yes' if result.is_valid else 'no'}")
    print(result.message)
    if result.suggested_action:
        print(f"-> {result.suggested_action}")
    return EXIT_OK if result.is_valid else EXIT_FAILURE


async def run_command(shared_data: SharedData, args: argparse.Namespace) -> int:
    """Dispatch a parsed command and wait for the translations it queued.

    Returns:
        int: Process exit code.
    """
    cli = CliService(shared_data.trans_manager)
    match args.command:
        case "health":
            return await handle_health(shared_data)
        case "validate-key":
            return await handle_validate_key(shared_data)

    handlers = {
        "init": handle_init,
        "add-language": handle_add_language,
        "translate-all": handle_translate_all,
        "progress": handle_progress,
        "list": handle_list,
        "stats": handle_stats,
    }
    exit_code: int = await handlers[args.command](cli, args)

    manager = shared_data.trans_manager
    if manager.queued_requests:
        if not shared_data.client.has_api_key:
            print(
                f"\n{len(manager.queued_requests)} translations are queued but no API key is configured "
                f"(set {shared_data.config.GEMINI.API_KEY_ENV}).",
                file=sys.stderr,
            )
        else:
            print(f"\nWaiting for {len(manager.queued_requests)} queued translations...")
            await manager.drain()
            print("Background translations finished.")
    return exit_code


async def main(argv: list[str] | None = None) -> int:
    """Main entry point of the console tool.

    Performs the following steps:
    1. Parse command-line arguments
    2. Load configuration and set up logging
    3. Build and start the shared services
    4. Run the command and wait for queued translations
    5. Shut the services down
    """
    check_python_version()
    args: argparse.Namespace = build_parser().parse_args(argv)
    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print("\nError: Failed to load configuration file.", file=sys.stderr)
        print(f"Details: {err}", file=sys.stderr)
        return EXIT_FAILURE

    setup_logging(config)
    shared_data = SharedData(config)
    try:
        await shared_data.async_init()
        await shared_data.component_load()
    except TranslationError as err:
        print(f"\nError: {err}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        return await run_command(shared_data, args)
    except TranslationError as err:
        print(f"\nError: {err}", file=sys.stderr)
        return EXIT_FAILURE
    finally:
        await shared_data.component_teardown()


def run() -> None:
    try:
        exit_code: int = asyncio.run(main())
    except KeyboardInterrupt:
        print("\n\nCancelled by user.", file=sys.stderr)
        exit_code = 130
    except (OSError, RuntimeError) as err:
        print(f"\nFatal error: {err}", file=sys.stderr)
        exit_code = EXIT_FAILURE
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
