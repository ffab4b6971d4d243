#!/usr/bin/env python3
"""
Localization validation script for the patch history client.

Validates:
1. EN keys vs all other languages - detects missing keys
2. Placeholder mismatch (e.g. {project} vs {project} consistency)
3. Extra keys in non-EN languages
4. Structured report for CI

Exit code 1 if validation fails (for CI).
"""

import re
import sys
from typing import Dict, List, Mapping, Optional, Set, Tuple

from app.i18n import FALLBACK_LANGUAGE, LANGUAGES


def extract_placeholders(text: str) -> Set[str]:
    """Extract placeholder names from format string (e.g., {count}, {project})."""
    if not isinstance(text, str):
        return set()
    pattern = r'\{(\w+)(?:[:!][^}]*)?\}'
    return set(re.findall(pattern, text))


def validate_localization(
    tables: Optional[Mapping[str, Dict[str, str]]] = None,
) -> Tuple[bool, List[str], List[str]]:
    """
    Validate translation coverage and consistency.

    Returns:
        Tuple of (success, errors, warnings)
    """
    tables = LANGUAGES if tables is None else tables
    errors: List[str] = []
    warnings: List[str] = []

    if FALLBACK_LANGUAGE not in tables:
        errors.append(f"{FALLBACK_LANGUAGE} not found - required as canonical reference")
        return False, errors, warnings

    canonical = tables[FALLBACK_LANGUAGE]
    canonical_keys = set(canonical.keys())

    for lang, table in tables.items():
        if lang == FALLBACK_LANGUAGE:
            continue

        lang_keys = set(table.keys())

        missing = canonical_keys - lang_keys
        if missing:
            errors.append(
                f"[{lang}] Missing {len(missing)} keys: "
                f"{', '.join(sorted(missing)[:15])}"
                + (f" ... and {len(missing) - 15} more" if len(missing) > 15 else "")
            )

        extra = lang_keys - canonical_keys
        if extra:
            warnings.append(
                f"[{lang}] Extra keys not in {FALLBACK_LANGUAGE.upper()}: "
                f"{', '.join(sorted(extra)[:10])}"
                + (f" ... and {len(extra) - 10} more" if len(extra) > 10 else "")
            )

        for key in sorted(canonical_keys & lang_keys):
            expected = extract_placeholders(canonical[key])
            actual = extract_placeholders(table[key])
            if expected != actual:
                errors.append(
                    f"[{lang}] Placeholder mismatch for '{key}': "
                    f"{FALLBACK_LANGUAGE.upper()} has {sorted(expected)}, {lang.upper()} has {sorted(actual)}"
                )

    return len(errors) == 0, errors, warnings


def main() -> int:
    """Run validation and print report."""
    success, errors, warnings = validate_localization()

    if errors:
        print("❌ LOCALIZATION VALIDATION FAILED\n")
        print(f"Errors ({len(errors)}):")
        for e in errors[:30]:
            print(f"  • {e}")
        if len(errors) > 30:
            print(f"  ... and {len(errors) - 30} more errors")

    if warnings:
        print(f"\n⚠️  Warnings ({len(warnings)}):")
        for w in warnings[:15]:
            print(f"  • {w}")

    if success:
        print("✅ LOCALIZATION VALIDATION PASSED")
        for lang, table in LANGUAGES.items():
            print(f"  • {lang}: {len(table)} keys")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
