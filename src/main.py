# src/main.py — v3
"""CLI entry point — lint, validate, generate-rule, cache commands.

Usage:
    ai-lint lint [files...] [--all | --changed] [options]
    ai-lint validate [--config PATH]
    ai-lint generate-rule [--config PATH]
    ai-lint cache clear | status

Exit codes: 0 success, 1 lint failure, 2 configuration / resolution /
authentication failure.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from ailint.cache.json_store import JsonCacheStore
from ailint.config.loader import DEFAULT_CONFIG_PATH, ConfigLoader
from ailint.config.models import LinterConfig
from ailint.config.settings import ConfigurationError, Settings, load_settings
from ailint.core.models import LintJob
from ailint.files.resolver import FileResolutionError, FileResolver
from ailint.lint.engine import LinterEngine, ProgressCallback
from ailint.lint.judge import RemoteJudge
from ailint.lint.report_only import run_report_only
from ailint.lint.summary import EXIT_FATAL, EXIT_OK, empty_summary
from ailint.llm.client_factory import create_llm_client
from ailint.llm.model_map import ModelCatalog
from ailint.llm.retry import LLMFatalError
from ailint.logging.logger import get_logger, setup_logging
from ailint.reporting.console_reporter import ConsoleReporter
from ailint.reporting.json_report import DEFAULT_REPORT_FILE, write_json_report
from ailint.rules.generate_flow import run_generate_rule_flow
from ailint.rules.generator import RuleGenerationError, RuleGenerator
from ailint.rules.matcher import RuleMatcher
from ailint.version import __version__

logger = get_logger("cli")

_CREDENTIAL_ENV = {
    "openrouter": ("OPEN_ROUTER_KEY", "open_router_key"),
    "anthropic": ("ANTHROPIC_API_KEY", "anthropic_api_key"),
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging(
        level="DEBUG" if args.debug else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_FATAL

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (ConfigurationError, FileResolutionError, LLMFatalError, RuleGenerationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FATAL
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.debug)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FATAL


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ai-lint",
        description=f"ai-lint v{__version__} — Lint files with natural-language rules judged by an LLM",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- lint ---
    p_lint = subparsers.add_parser("lint", help="Lint files against the configured rules")
    p_lint.add_argument("files", nargs="*", help="Files to lint")
    scope = p_lint.add_mutually_exclusive_group()
    scope.add_argument(
        "--all", action="store_true",
        help="Lint every file matching a rule glob",
    )
    scope.add_argument(
        "--changed", action="store_true",
        help="Lint files changed since the git base branch",
    )
    p_lint.add_argument(
        "--base", default=None,
        help="Base branch for --changed (default: git_base from config)",
    )
    p_lint.add_argument(
        "-c", "--config", default=DEFAULT_CONFIG_PATH,
        help=f"Config file (default: {DEFAULT_CONFIG_PATH})",
    )
    p_lint.add_argument(
        "-v", "--verbose", action="store_true",
        help="Print one progress line per job",
    )
    p_lint.add_argument(
        "--report-only", action="store_true",
        help="Write a JSON report instead of printing results",
    )
    p_lint.add_argument(
        "--report-file", default=DEFAULT_REPORT_FILE,
        help=f"Report path for --report-only (default: {DEFAULT_REPORT_FILE})",
    )
    p_lint.set_defaults(func=_cmd_lint)

    # --- validate ---
    p_validate = subparsers.add_parser("validate", help="Validate the config file")
    p_validate.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH)
    p_validate.set_defaults(func=_cmd_validate)

    # --- generate-rule ---
    p_generate = subparsers.add_parser(
        "generate-rule", help="Generate a rule from a description",
    )
    p_generate.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH)
    p_generate.set_defaults(func=_cmd_generate_rule)

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Manage the result cache")
    cache_sub = p_cache.add_subparsers(dest="cache_command")
    p_clear = cache_sub.add_parser("clear", help="Delete the cache file")
    p_clear.set_defaults(func=_cmd_cache_clear)
    p_status = cache_sub.add_parser("status", help="Show cache entries and size")
    p_status.set_defaults(func=_cmd_cache_status)

    return parser


async def _cmd_lint(args: argparse.Namespace, settings: Settings) -> int:
    """Resolve files, run the engine, report.

    In report-only mode every failure is recorded in the JSON report and
    returns exit code 2 instead of propagating.
    """
    try:
        return await _lint(args, settings)
    except Exception as exc:
        if not args.report_only:
            raise
        logger.debug("Report-only lint failed", exc_info=True)
        path = write_json_report(
            args.report_file, [], empty_summary(), EXIT_FATAL,
            error=str(exc) or type(exc).__name__,
        )
        print(f"Report written: {path}")
        return EXIT_FATAL


async def _lint(args: argparse.Namespace, settings: Settings) -> int:
    catalog = ModelCatalog()
    config = ConfigLoader(catalog).load(args.config)
    _require_credential(config, settings)

    cache = JsonCacheStore(settings.cache_dir)
    matcher = RuleMatcher(config.rules)
    resolver = FileResolver(git_base=args.base or config.git_base)

    if args.all:
        file_paths = resolver.resolve_all(matcher.all_globs())
    elif args.changed:
        file_paths = resolver.resolve_changed()
    elif args.files:
        file_paths = resolver.resolve_explicit(args.files)
    else:
        return _nothing_to_lint(args, "No files to lint. Use --all, --changed, or specify explicit files.")

    if not file_paths:
        return _nothing_to_lint(args, "No files to lint.")

    client = create_llm_client(config.provider, settings, provider_url=config.provider_url)
    judge = RemoteJudge(client, default_model=config.model, catalog=catalog)

    if args.report_only:
        return await run_report_only(
            file_paths, config, args.report_file, cache, judge, matcher
        )

    where = f"{config.provider} @ {config.provider_url}" if config.provider_url else config.provider
    print(
        f"Linting {len(file_paths)} files against {len(config.rules)} rules "
        f"(provider: {where}, model: {config.model})...\n"
    )
    engine = LinterEngine(
        cache=cache,
        judge=judge,
        matcher=matcher,
        reporter=ConsoleReporter(),
        on_progress=_progress_printer(args.verbose),
    )
    run = await engine.run(file_paths, config)
    return run.exit_code


def _nothing_to_lint(args: argparse.Namespace, message: str) -> int:
    if args.report_only:
        path = write_json_report(args.report_file, [], empty_summary(), EXIT_OK)
        print(f"Report written: {path}")
    else:
        print(message)
    return EXIT_OK


async def _cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    """Load the config and print its effective settings."""
    config = ConfigLoader(ModelCatalog()).load(args.config)
    print("Configuration is valid")
    print(f"  Provider: {config.provider}")
    if config.provider_url:
        print(f"  Provider URL: {config.provider_url}")
    print(f"  Model: {config.model}")
    print(f"  Concurrency: {config.concurrency}")
    print(f"  Git base: {config.git_base}")
    print(f"  Rules: {len(config.rules)} ({', '.join(config.rule_ids())})")
    return EXIT_OK


async def _cmd_generate_rule(args: argparse.Namespace, settings: Settings) -> int:
    """Interactive rule generation, appending to the config file."""
    catalog = ModelCatalog()
    if Path(args.config).exists():
        config = ConfigLoader(catalog).load(args.config)
    else:
        config = LinterConfig(rules=[])
    _require_credential(config, settings)

    client = create_llm_client(config.provider, settings, provider_url=config.provider_url)
    generator = RuleGenerator(client, catalog.resolve(config.provider, config.model))
    return await run_generate_rule_flow(args.config, input, generator)


async def _cmd_cache_clear(args: argparse.Namespace, settings: Settings) -> int:
    JsonCacheStore(settings.cache_dir).clear()
    print("Cache cleared")
    return EXIT_OK


async def _cmd_cache_status(args: argparse.Namespace, settings: Settings) -> int:
    cache = JsonCacheStore(settings.cache_dir)
    cache.load()
    status = cache.status()
    print(f"Cache entries: {status.entries}")
    print(f"Cache size: {status.size_bytes / 1024:.2f} KB")
    return EXIT_OK


def _require_credential(config: LinterConfig, settings: Settings) -> None:
    """Fail early when the hosted provider's key is not set."""
    if config.provider not in _CREDENTIAL_ENV:
        return
    env_name, field_name = _CREDENTIAL_ENV[config.provider]
    if not getattr(settings, field_name):
        raise ConfigurationError(
            f"{env_name} environment variable is required for the {config.provider} provider"
        )


def _progress_printer(verbose: bool) -> ProgressCallback:
    """Progress callback: one line per job when verbose, else a single updating line."""

    def _verbose(completed: int, total: int, job: LintJob, cached: bool) -> None:
        source = "cache" if cached else "api"
        print(
            f"  [{completed}/{total}] ({source}) {job.rule.id} — {job.file_path}",
            file=sys.stderr,
        )

    def _compact(completed: int, total: int, job: LintJob, cached: bool) -> None:
        end = "\n" if completed == total else ""
        print(f"\r  Linting... {completed}/{total}", end=end, file=sys.stderr, flush=True)

    return _verbose if verbose else _compact


if __name__ == "__main__":
    sys.exit(main())
