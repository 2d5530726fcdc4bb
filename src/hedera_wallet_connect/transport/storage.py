"""
Durable key/value storage used by the transport and the connector.
"""

import json
from pathlib import Path
from typing import Any, Optional, Protocol, Union


class KeyValueStorage(Protocol):
    async def get_item(self, key: str) -> Optional[Any]: ...

    async def set_item(self, key: str, value: Any) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._items: dict[str, Any] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[Any]:
        return self._items.get(key)

    async def set_item(self, key: str, value: Any) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """JSON file backed storage. The whole file is rewritten on every change."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    def _load(self) -> dict[str, Any]:
        try:
            return json.loads(self._path.read_text())
        except (FileNotFoundError, json.JSONDecodeError):
            return {}

    def _save(self, items: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(items, indent=2))

    async def get_item(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    async def set_item(self, key: str, value: Any) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    async def remove_item(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._save(items)
