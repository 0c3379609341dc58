"""
Model Store — hand an encoded model to another process.

Provides two implementations:

- **MemoryModelStore** — ephemeral, test-friendly; still stores encoded
  bytes so every load is a real decode
- **FilesystemModelStore** — writes ``<name>.appmodel.json`` files into a
  directory

All stores support ``save``, ``load``, ``exists`` and ``delete``.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config import ModelSettings
from .faults import ModelDecodeFault
from .model import ApplicationModel

logger = logging.getLogger("appmodel.store")

FILE_SUFFIX = ".appmodel.json"


class ModelStore:
    """Minimal interface every store must implement."""

    def save(self, name: str, model: ApplicationModel) -> str:
        raise NotImplementedError

    def load(self, name: str) -> Optional[ApplicationModel]:
        raise NotImplementedError

    def exists(self, name: str) -> bool:
        raise NotImplementedError

    def delete(self, name: str) -> bool:
        raise NotImplementedError


class MemoryModelStore(ModelStore):
    """Ephemeral in-memory store keyed by name."""

    def __init__(self, settings: Optional[ModelSettings] = None) -> None:
        self.settings = settings or ModelSettings()
        self._blobs: Dict[str, bytes] = {}

    def save(self, name: str, model: ApplicationModel) -> str:
        self._blobs[name] = model.to_bytes(indent=self.settings.json_indent)
        return model.digest

    def load(self, name: str) -> Optional[ApplicationModel]:
        blob = self._blobs.get(name)
        if blob is None:
            return None
        return ApplicationModel.from_bytes(blob, verify=self.settings.verify_integrity)

    def exists(self, name: str) -> bool:
        return name in self._blobs

    def delete(self, name: str) -> bool:
        return self._blobs.pop(name, None) is not None

    def names(self) -> List[str]:
        return sorted(self._blobs)


class FilesystemModelStore(ModelStore):
    """
    Persistent store writing one JSON file per model.

    Writes go to a temporary file in the same directory and are renamed
    into place, so a reader never sees a half-written model.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        settings: Optional[ModelSettings] = None,
    ) -> None:
        self.directory = Path(directory)
        self.settings = settings or ModelSettings()

    def path_for(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError(f"Invalid model name: {name!r}")
        return self.directory / f"{name}{FILE_SUFFIX}"

    def save(self, name: str, model: ApplicationModel) -> str:
        target = self.path_for(name)
        self.directory.mkdir(parents=True, exist_ok=True)

        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(model.to_bytes(indent=self.settings.json_indent))
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

        logger.debug("Saved model %s to %s", name, target)
        return model.digest

    def load(self, name: str) -> Optional[ApplicationModel]:
        path = self.path_for(name)
        if not path.exists():
            return None
        try:
            return ApplicationModel.from_bytes(
                path.read_bytes(), verify=self.settings.verify_integrity
            )
        except ModelDecodeFault as fault:
            fault.metadata["path"] = str(path)
            raise

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def delete(self, name: str) -> bool:
        path = self.path_for(name)
        if not path.exists():
            return False
        path.unlink()
        return True

    def names(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(
            p.name[: -len(FILE_SUFFIX)] for p in self.directory.glob(f"*{FILE_SUFFIX}")
        )
