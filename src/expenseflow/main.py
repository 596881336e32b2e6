"""Command line entry point."""
import sys
import argparse
import mimetypes
from datetime import date
from pathlib import Path

from .config.manager import ConfigManager
from .config.settings import get_settings
from .llm.client import GeminiClient
from .llm.extractor import ExpenseExtractor
from .llm.models import SourceKind
from .orchestrator.processor import ExpenseProcessor
from .reports import formatter
from .storage.expense_store import ExpenseStore
from .utils.exceptions import ConfigError, ExtractionUnavailableError
from .utils.logger import get_logger, set_log_level

logger = get_logger()


def _load_config(require_model: bool):
    """Load configuration; the API key is only mandatory for images and insights."""
    config_manager = ConfigManager()
    config = config_manager.load_config()

    if config is None:
        if require_model:
            logger.critical("No configuration found. Set GEMINI_API_KEY or create config.json.")
            sys.exit(1)
        return None

    is_valid, message = config_manager.validate_config(config)
    if not is_valid:
        if require_model:
            logger.critical(f"Invalid configuration: {message}")
            sys.exit(1)
        logger.warning(f"Invalid configuration ({message}), continuing without the model")
        return None

    return config


def _build_processor(config) -> ExpenseProcessor:
    """Wire the extractor, store and processor together."""
    client = None
    if config is not None:
        client = GeminiClient(
            api_key=config.gemini_api_key,
            model_name=config.model_name,
            timeout_seconds=config.request_timeout_seconds
        )
    else:
        logger.warning("Gemini API key not configured, using keyword heuristics only")

    store = ExpenseStore(Path(config.database_path) if config and config.database_path else None)
    return ExpenseProcessor(ExpenseExtractor(client), store)


def _add_text(processor: ExpenseProcessor, owner: str, text: str) -> int:
    try:
        result = processor.process_text(owner, text)
    except ExtractionUnavailableError:
        print(formatter.format_unavailable(SourceKind.TEXT))
        return 1

    if result.needs_clarification:
        print(formatter.format_clarification(result.draft))
    else:
        print(formatter.format_confirmation(result.record))
    return 0


def _add_image(processor: ExpenseProcessor, owner: str, path: Path, mime_type: str) -> int:
    if not path.exists():
        print(f"Error: File not found: {path}")
        return 1

    mime_type = mime_type or mimetypes.guess_type(path.name)[0] or "image/jpeg"
    try:
        result = processor.process_image(owner, path.read_bytes(), mime_type)
    except ExtractionUnavailableError:
        print(formatter.format_unavailable(SourceKind.IMAGE))
        return 1

    if result.needs_clarification:
        print(formatter.format_clarification(result.draft))
    else:
        print(formatter.format_confirmation(result.record))
    return 0


def main():
    """Main entry point for the ExpenseFlow CLI."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description=f"{settings.app_name} expense tracker")
    parser.add_argument("--owner", default="local", help="Owner identity (default: local)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Record an expense from text, e.g. \"Kopi 15rb\"")
    add_parser.add_argument("text", nargs="+", help="Expense statement")

    image_parser = subparsers.add_parser("add-image", help="Record an expense from a receipt photo")
    image_parser.add_argument("path", type=Path, help="Image file")
    image_parser.add_argument("--mime-type", help="Override detected MIME type")

    report_parser = subparsers.add_parser("report", help="Monthly report by category")
    report_parser.add_argument("--year", type=int, help="Report year (default: current)")
    report_parser.add_argument("--month", type=int, choices=range(1, 13), metavar="MONTH",
                               help="Report month 1-12 (default: current)")
    report_parser.add_argument("--insights", action="store_true", help="Add model commentary")

    analytics_parser = subparsers.add_parser("analytics", help="Spending of all owners by category")
    analytics_parser.add_argument("--year", type=int, help="Year (default: current)")
    analytics_parser.add_argument("--month", type=int, choices=range(1, 13), metavar="MONTH",
                                  help="Month 1-12 (default: current)")

    recent_parser = subparsers.add_parser("recent", help="Most recent expenses")
    recent_parser.add_argument("--limit", type=int, help=f"Number of expenses (default: {settings.recent_limit})")

    subparsers.add_parser("categories", help="List available categories")

    args = parser.parse_args()

    if args.command == "categories":
        print(formatter.format_categories())
        return

    try:
        config = _load_config(
            require_model=args.command == "add-image" or getattr(args, "insights", False)
        )
    except ConfigError as e:
        logger.critical(str(e))
        sys.exit(1)

    if config is not None:
        set_log_level(config.log_level)

    processor = _build_processor(config)

    if args.command == "add":
        sys.exit(_add_text(processor, args.owner, " ".join(args.text)))
    elif args.command == "add-image":
        sys.exit(_add_image(processor, args.owner, args.path, args.mime_type))
    elif args.command == "report":
        report = processor.monthly_report(args.owner, args.year, args.month, include_insights=args.insights)
        print(formatter.format_report(report, settings.insights_max_chars))
    elif args.command == "analytics":
        today = date.today()
        year, month = args.year or today.year, args.month or today.month
        print(formatter.format_analytics(processor.analytics(year, month), year, month))
    elif args.command == "recent":
        print(formatter.format_recent(processor.recent_expenses(args.owner, args.limit)))


if __name__ == "__main__":
    main()
