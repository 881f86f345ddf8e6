"""
Signal loader: reads feature-extractor output from YAML or JSON files.

Expected shape: a list of mappings, or a mapping with a top-level
``objects`` list. Keys may be snake_case or camelCase.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from lexiq.domain.errors import DataError
from lexiq.domain.priority.models import LanguageObjectSignal

logger = logging.getLogger(__name__)

_ALIASES = {
    "relationalDensity": "relational_density",
    "contextualContribution": "contextual_contribution",
    "irtDifficulty": "irt_difficulty",
    "type": "kind",
}
_FIELDS = {
    "id",
    "frequency",
    "relational_density",
    "contextual_contribution",
    "irt_difficulty",
    "content",
    "kind",
}


def signal_from_mapping(raw: dict[str, Any]) -> LanguageObjectSignal:
    data = {_ALIASES.get(k, k): v for k, v in raw.items()}
    data = {k: v for k, v in data.items() if k in _FIELDS}
    missing = {"id", "frequency", "relational_density", "contextual_contribution"} - data.keys()
    if missing:
        raise DataError(
            f"Signal {raw.get('id', '?')!r} is missing {sorted(missing)}",
            field=sorted(missing)[0],
        )
    data["id"] = str(data["id"])
    return LanguageObjectSignal(**data)


def load_signals(path: Path) -> list[LanguageObjectSignal]:
    """
    Parse and validate every signal in a file.

    Raises:
        DataError: If the file is unreadable, malformed, or any signal is out of range.
    """
    path = Path(path)
    try:
        # YAML is a superset of JSON, so one parser covers both
        doc = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise DataError(f"Cannot read signals file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DataError(f"Invalid YAML in {path}: {e}") from e

    if isinstance(doc, dict):
        doc = doc.get("objects")
    if not isinstance(doc, list):
        raise DataError(f"{path} must contain a list of objects")

    signals: list[LanguageObjectSignal] = []
    seen: set[str] = set()
    for i, raw in enumerate(doc):
        if not isinstance(raw, dict):
            raise DataError(f"Entry {i} in {path} is not a mapping")
        signal = signal_from_mapping(raw)
        if signal.id in seen:
            raise DataError(f"Duplicate object id {signal.id!r} in {path}", field="id")
        seen.add(signal.id)
        signals.append(signal)

    logger.info(f"Loaded {len(signals)} signals from {path}")
    return signals
