"""
JSON file storage for registry inputs and generated artifacts.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from .base import StorageBase, DataError

logger = logging.getLogger(__name__)


def to_json(data: Any, indent: Optional[int] = 2) -> str:
    """Serialize data the way generated artifacts are written (insertion order, UTF-8)."""
    return json.dumps(data, indent=indent, ensure_ascii=False)


class JsonStorage(StorageBase):
    """
    Reads and writes JSON documents below a base directory.

    Missing required files and malformed JSON raise DataError. Each file is
    written to a sibling temp file first and then renamed into place.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Args:
            config: Dict with base_path (registry or output directory) and
                indent (default 2)
        """
        super().__init__(config)
        self.base_path = Path(config.get('base_path', '.'))
        self.indent = config.get('indent', 2)

    def health_check(self) -> bool:
        return self.base_path.is_dir()

    def _get_full_path(self, filename: str) -> Path:
        # ".json" is implied when missing
        if not filename.endswith('.json'):
            filename = f"{filename}.json"
        return self.base_path / filename

    def load(self, filename: str, default: Any = None, required: bool = True) -> Optional[Any]:
        """
        Parse one JSON document.

        Args:
            filename: Path relative to base_path
            default: Value returned for a missing optional file
            required: Whether a missing file is an error

        Returns:
            Loaded data

        Raises:
            DataError: If the file is required and missing, or not valid JSON
        """
        filepath = self._get_full_path(filename)

        if not filepath.exists():
            if required:
                raise DataError(f"Required file not found: {filepath}")
            logger.debug(f"Optional file {filepath} not found, using default")
            return default

        try:
            with open(filepath, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load JSON file {filepath}: {e}")
            raise DataError(f"JSON load failed for {filepath}: {e}")

        logger.debug(f"Loaded data from {filepath}")
        return data

    def save(self, filename: str, data: Any, indent: Optional[int] = None) -> bool:
        """
        Write one document, keeping the key order of data.

        Args:
            filename: Path relative to base_path
            data: JSON-serializable document
            indent: Overrides the storage default
        """
        content = to_json(data, self.indent if indent is None else indent)
        self._write(self._get_full_path(filename), content)
        return True

    def _write(self, filepath: Path, content: str) -> None:
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)

            staging = filepath.with_suffix(".tmp")
            with open(staging, "w", encoding="utf-8") as f:
                f.write(content)
            staging.replace(filepath)

        except OSError as e:
            logger.error(f"Failed to save JSON file {filepath}: {e}")
            raise DataError(f"JSON save failed for {filepath}: {e}")

        logger.info(f"Wrote {filepath}")

    def save_all(self, documents: Iterable[Tuple[str, Any, Optional[int]]]) -> int:
        """
        Save several documents; serialization of all of them happens before any write.

        Args:
            documents: (filename, data, indent) triples

        Returns:
            Number of files written
        """
        staged = []
        for filename, data, indent in documents:
            try:
                content = to_json(data, self.indent if indent is None else indent)
            except (TypeError, ValueError) as e:
                raise DataError(f"Cannot serialize {filename}: {e}")
            staged.append((self._get_full_path(filename), content))

        for filepath, content in staged:
            self._write(filepath, content)
        return len(staged)
