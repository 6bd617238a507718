"""
Domra Lexicon Export
Serializes the in-memory lexicon to a downloadable JSON document
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging

from .config import ExportConfig
from .errors import ExportError
from .models import Lexicon

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def build_export(lexicon: Lexicon, now: Optional[datetime] = None,
                 config: Optional[ExportConfig] = None) -> Dict[str, Any]:
    """
    Build the export envelope

    Args:
        lexicon: Loaded lexicon
        now: Export time, defaults to the current UTC time
        config: Export settings (exporter name, fallback version)

    Returns:
        Dict with ``metadata``, ``terms`` and ``categories``
    """
    config = config or ExportConfig()
    now = now or _utcnow()

    return {
        "metadata": {
            "exportDate": iso_timestamp(now),
            "totalTerms": len(lexicon.terms),
            "version": lexicon.version or config.default_version,
            "exportedBy": config.exported_by,
        },
        "terms": [term.to_dict() for term in lexicon.terms],
        "categories": {key: category.to_dict() for key, category in lexicon.categories.items()},
    }


def export_filename(now: Optional[datetime] = None, config: Optional[ExportConfig] = None) -> str:
    config = config or ExportConfig()
    now = now or _utcnow()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"{config.filename_prefix}-{now.strftime('%Y-%m-%d')}.json"


def export_json(lexicon: Lexicon, now: Optional[datetime] = None,
                config: Optional[ExportConfig] = None) -> str:
    """Export as pretty-printed JSON text"""
    try:
        return json.dumps(build_export(lexicon, now, config), indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        logger.error(f"Error exporting data: {e}")
        raise ExportError(f"Could not serialize lexicon: {e}") from e


def write_export(lexicon: Lexicon, directory: Union[str, Path] = ".",
                 now: Optional[datetime] = None,
                 config: Optional[ExportConfig] = None) -> Path:
    """
    Write the export document into a directory

    Returns:
        Path of the written file

    Raises:
        ExportError: If serialization or writing fails
    """
    now = now or _utcnow()
    content = export_json(lexicon, now, config)
    output_path = Path(directory) / export_filename(now, config)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Error exporting data: {e}")
        raise ExportError(f"Could not write {output_path}: {e}") from e

    logger.info(f"Data exported successfully to {output_path}")
    return output_path
