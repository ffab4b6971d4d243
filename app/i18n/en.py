# -*- coding: utf-8 -*-
"""English (en) strings. Canonical language and fallback."""

LANG = {
    "app.title": "Patch History",
    "common.yes": "Yes",
    "common.no": "No",

    # History listing
    "history.title": "Patch history for project {project}",
    "history.empty": "No patch history yet.",
    "history.count": "{count} record(s)",
    "history.item": "{id}  {time}  [{source}]  {summary}",
    "history.item_versions": "    v{base} → v{to}",
    "history.item_impact": "    +{added} ~{updated} -{removed}",
    "history.source_unknown": "—",
    "source.AI": "AI",
    "source.MANUAL": "Manual",
    "source.IMPORT": "Import",
    "source.ROLLBACK": "Rollback",

    # Save / rollback
    "history.saved": "Saved patch {id} as version {version}.",
    "history.saved_no_version": "Saved patch {id}.",
    "rollback.done": "Project {project} rolled back to before patch {id}.",

    # Locale
    "locale.current": "Current language: {locale}",
    "locale.changed": "Language changed to {locale}.",

    # Errors
    "errors.transport": "Could not reach the history service: {error}",
    "errors.application": "The history service rejected the request: {error}",
    "errors.invalid_response": "The history service sent an unreadable response: {error}",
    "errors.record_file": "Cannot read patch record from {path}: {error}",
    "errors.config": "Invalid configuration: {error}",
    "errors.preferences": "Cannot save preferences: {error}",
}
