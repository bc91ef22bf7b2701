"""Translation validator — every language must mirror the English keys.

Used by ``gazer check-translations`` and by the test suite.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gazer.i18n import DEFAULT_LANGUAGE, TRANSLATIONS_DIR, t


@dataclass(frozen=True, slots=True)
class TranslationReport:
    """Key comparison of one language against the English base.

    Attributes:
        missing: Keys present in English but not in this language.
        extra: Keys present in this language but not in English.

    """

    missing: tuple[str, ...]
    extra: tuple[str, ...]

    @property
    def is_valid(self) -> bool:
        return not self.missing and not self.extra


def nested_keys(tree: dict[str, Any], prefix: str = "") -> list[str]:
    """Flatten a nested mapping into dotted leaf keys."""
    keys: list[str] = []
    for key, value in tree.items():
        full = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            keys.extend(nested_keys(value, full))
        else:
            keys.append(full)
    return keys


def _load(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def validate_translations(directory: Path = TRANSLATIONS_DIR) -> dict[str, TranslationReport]:
    """Compare every ``<lang>.json`` in *directory* against ``en.json``.

    Raises:
        FileNotFoundError: If the English base file is missing.

    """
    base_keys = nested_keys(_load(directory / f"{DEFAULT_LANGUAGE}.json"))
    base_set = set(base_keys)

    reports: dict[str, TranslationReport] = {}
    for path in sorted(directory.glob("*.json")):
        lang = path.stem
        if lang == DEFAULT_LANGUAGE:
            continue
        keys = nested_keys(_load(path))
        key_set = set(keys)
        reports[lang] = TranslationReport(
            missing=tuple(k for k in base_keys if k not in key_set),
            extra=tuple(k for k in keys if k not in base_set),
        )
    return reports


def print_report(directory: Path = TRANSLATIONS_DIR) -> bool:
    """Print a validation report to stderr.  Returns True if all languages are valid."""
    base_path = directory / f"{DEFAULT_LANGUAGE}.json"
    if not base_path.is_file():
        print(f"  {t('translations.baseMissing')}", file=sys.stderr)
        return False

    count = len(nested_keys(_load(base_path)))
    lines = ["", f"  {t('translations.keysFound').format(count=count)}", ""]

    reports = validate_translations(directory)
    for lang, report in reports.items():
        label = lang.upper()
        if report.is_valid:
            lines.append(f"  + {t('translations.valid').format(lang=label)}")
            continue
        lines.append(f"  x {t('translations.invalid').format(lang=label)}")
        if report.missing:
            lines.append(f"    {t('translations.missing').format(count=len(report.missing))}")
            lines.extend(f"      - {key}" for key in report.missing)
        if report.extra:
            lines.append(f"    {t('translations.extra').format(count=len(report.extra))}")
            lines.extend(f"      + {key}" for key in report.extra)

    all_valid = all(report.is_valid for report in reports.values())
    lines.append("")
    lines.append(f"  {t('translations.allValid' if all_valid else 'translations.someInvalid')}")
    lines.append("")
    print("\n".join(lines), file=sys.stderr)
    return all_valid
