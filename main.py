"""
Command-line front end for the patch history client.

Usage:
    python main.py [--project ID] history
    python main.py [--project ID] save RECORD.json
    python main.py [--project ID] rollback PATCH_ID
    python main.py locale [LANG]
"""
import argparse
import asyncio
import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import config
from app.core.logging_config import setup_logging
from app.i18n import DEFAULT_LANGUAGE, TranslationContext
from app.services.history import (
    fetch_history,
    save_history,
    rollback_patch,
    PatchSource,
    HistoryClientError,
    TransportError,
    ApplicationError,
    InvalidResponseError,
)
from app.services.history.models import now_ms
from app.services.language_service import (
    LOCALE_PREFERENCE_KEY,
    PreferenceStore,
    init_locale,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def _format_time(timestamp_ms: Any) -> str:
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    except (TypeError, ValueError, OverflowError, OSError):
        return str(timestamp_ms)


def format_record(record: Any, i18n: TranslationContext) -> List[str]:
    """Render one history record as display lines."""
    if not isinstance(record, dict):
        logger.warning(f"Skipping structured rendering of non-object history entry [type={type(record).__name__}]")
        return [str(record)]

    source = record.get("source")
    source_label = i18n.t(f"source.{source}") if source else i18n.t("history.source_unknown")
    lines = [
        i18n.t(
            "history.item",
            id=record.get("id", "?"),
            time=_format_time(record.get("timestamp")),
            source=source_label,
            summary=record.get("summary", ""),
        )
    ]
    if record.get("baseVersion") is not None and record.get("toVersion") is not None:
        lines.append(i18n.t("history.item_versions", base=record["baseVersion"], to=record["toVersion"]))
    counts = record.get("counts")
    if isinstance(counts, dict):
        lines.append(
            i18n.t(
                "history.item_impact",
                added=counts.get("added", 0),
                updated=counts.get("updated", 0),
                removed=counts.get("removed", 0),
            )
        )
    return lines


def load_record_file(path: str) -> Dict[str, Any]:
    """
    Read a record from a JSON file.

    The file content is sent as written; only absent id / timestamp keys are
    added.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not a JSON object or has a bad source
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    if data.get("source") is not None:
        PatchSource(data["source"])

    record = dict(data)
    if "id" not in record:
        record["id"] = uuid.uuid4().hex
    if "timestamp" not in record:
        record["timestamp"] = now_ms()
    return record


async def cmd_history(args, i18n: TranslationContext) -> int:
    records = await fetch_history(args.project)
    print(i18n.t("history.title", project=args.project))
    if not records:
        print(i18n.t("history.empty"))
        return EXIT_OK
    for record in records:
        for line in format_record(record, i18n):
            print(line)
    print(i18n.t("history.count", count=len(records)))
    return EXIT_OK


async def cmd_save(args, i18n: TranslationContext) -> int:
    try:
        record = load_record_file(args.file)
    except (OSError, ValueError) as e:
        print(i18n.t("errors.record_file", path=args.file, error=e), file=sys.stderr)
        return EXIT_FAILURE
    result = await save_history(record, args.project)
    version = result.get("version") if isinstance(result, dict) else None
    if version is None:
        print(i18n.t("history.saved_no_version", id=record["id"]))
    else:
        print(i18n.t("history.saved", id=record["id"], version=version))
    return EXIT_OK


async def cmd_rollback(args, i18n: TranslationContext) -> int:
    await rollback_patch(args.patch_id, args.project)
    print(i18n.t("rollback.done", project=args.project, id=args.patch_id))
    return EXIT_OK


async def cmd_locale(args, i18n: TranslationContext, store: PreferenceStore) -> int:
    if args.language:
        store.set(LOCALE_PREFERENCE_KEY, args.language)
        print(i18n.with_locale(args.language).t("locale.changed", locale=args.language))
    else:
        print(i18n.t("locale.current", locale=i18n.locale))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="patch-history", description="Patch history client")
    parser.add_argument("--project", default=config.DEFAULT_PROJECT_ID, help="Backend project id")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("history", help="List patch history")

    save = sub.add_parser("save", help="Save a patch record from a JSON file")
    save.add_argument("file")

    rollback = sub.add_parser("rollback", help="Roll back to before a patch")
    rollback.add_argument("patch_id")

    loc = sub.add_parser("locale", help="Show or set the preferred language")
    loc.add_argument("language", nargs="?")
    return parser


async def run(argv: Optional[List[str]] = None, store: Optional[PreferenceStore] = None) -> int:
    """Parse arguments and execute one command. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    i18n = TranslationContext(DEFAULT_LANGUAGE)

    try:
        store = store or PreferenceStore()
        i18n = init_locale(store)
        if args.command == "history":
            return await cmd_history(args, i18n)
        if args.command == "save":
            return await cmd_save(args, i18n)
        if args.command == "rollback":
            return await cmd_rollback(args, i18n)
        return await cmd_locale(args, i18n, store)
    except TransportError as e:
        print(i18n.t("errors.transport", error=e), file=sys.stderr)
    except ApplicationError as e:
        print(i18n.t("errors.application", error=e), file=sys.stderr)
    except InvalidResponseError as e:
        print(i18n.t("errors.invalid_response", error=e), file=sys.stderr)
    except HistoryClientError as e:
        logger.error(f"Unhandled history client error: {e}")
    except ValueError as e:
        print(i18n.t("errors.config", error=e), file=sys.stderr)
    except OSError as e:
        print(i18n.t("errors.preferences", error=e), file=sys.stderr)
    return EXIT_FAILURE


def main() -> int:
    try:
        log_level = config.get_log_level()
    except ValueError:
        # run() reports the configuration error
        log_level = "INFO"
    setup_logging(log_level)
    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
