import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import CorruptState, IOFailure
from .validation import ValidationMode, normalize, validate

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """
    Keeps the whole catalog in one JSON array on disk.

    Saves go to a temp file next to the target and are moved into place
    with os.replace, so a reader never sees a half-written file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[List[Dict[str, Any]]]:
        """Return the stored products, or None when there is no file yet."""
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptState(self.path, str(e)) from e

        if not isinstance(data, list):
            raise CorruptState(self.path, "root must be an array of products")

        seen = set()
        products: List[Dict[str, Any]] = []
        for idx, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise CorruptState(self.path, f"product at index {idx} is not an object")
            pid = entry.get("id")
            if not isinstance(pid, str) or not pid:
                raise CorruptState(self.path, f"product at index {idx} has no id")
            if pid in seen:
                raise CorruptState(self.path, f"duplicate product id: {pid}")
            errors = validate(entry, ValidationMode.CREATE)
            if errors:
                raise CorruptState(self.path, f"product {pid} is invalid: {'; '.join(errors)}")
            seen.add(pid)
            products.append({"id": pid, **normalize(entry)})

        logger.info("Loaded %d products from %s", len(products), self.path)
        return products

    def save(self, products: List[Dict[str, Any]]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(products, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_name)
            raise IOFailure(self.path, str(e)) from e
