"""Key/value settings persisted in a single JSON document."""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

MISSING: Any = object()


@lru_cache(maxsize=None)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


class SettingsError(Exception):
    """Base class for settings store failures."""


class SettingsIOError(SettingsError, OSError):
    """The backing file could not be opened, read or written."""


class CorruptedError(SettingsError, ValueError):
    """The backing file is not a JSON object."""


class SettingsTypeError(SettingsError, TypeError):
    """A value could not be converted to or from JSON."""


class SettingsNotFoundError(SettingsError, KeyError):
    """No entry exists under the requested key."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class SettingsStore:
    """Settings file handle.

    Every accessor re-reads the whole file, so the store never holds
    document state between calls. There is no locking: two handles on
    the same file can overwrite each other's changes.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else settings.default_path()
        self._file = self._open_file(self.path)

    @classmethod
    def open(cls, path: str | Path | None = None) -> "SettingsStore":
        """Open the settings file at `path`, creating it as `{}` if missing."""
        return cls(path)

    @staticmethod
    def _open_file(path: Path):
        if not path.exists():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                file = path.open("xb+")
            except OSError as e:
                raise SettingsIOError(f"Cannot create settings file {path}: {e}") from e
            try:
                file.write(b"{}")
                file.flush()
            except OSError as e:
                file.close()
                raise SettingsIOError(f"Cannot initialize settings file {path}: {e}") from e
            logger.debug("Created settings file %s", path)
            return file

        try:
            file = path.open("rb+")
        except OSError as e:
            raise SettingsIOError(f"Cannot open settings file {path}: {e}") from e
        logger.debug("Opened settings file %s", path)
        return file

    # ─────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────

    def get(self, key: str, type_: Any = Any, default: Any = MISSING) -> Any:
        """
        Read the value stored under `key`, validated as `type_`.

        Args:
            key: Entry name
            type_: Any type pydantic can validate (int, list[str], a dataclass, ...).
                Validation is strict: "5" is not an int and 1 is not a bool.
            default: Returned when the key is absent instead of raising

        Raises:
            SettingsNotFoundError: No entry under `key` and no default given
            SettingsTypeError: The stored value does not fit `type_`
        """
        def read(data: dict[str, Any]) -> Any:
            if key not in data:
                if default is not MISSING:
                    return default
                raise SettingsNotFoundError(f"Setting not found: {key}")
            try:
                return _adapter(type_).validate_json(json.dumps(data.pop(key)), strict=True)
            except ValidationError as e:
                raise SettingsTypeError(f"Setting {key} has the wrong type: {e}") from e

        return self._apply(read, write_back=False)

    def has_value(self, key: str) -> bool:
        """Check if there's a value under `key`."""
        return self._apply(lambda data: key in data, write_back=False)

    def __contains__(self, key: str) -> bool:
        return self.has_value(key)

    def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""
        if not isinstance(key, str):
            raise SettingsTypeError(f"Setting keys must be strings, got {type(key).__name__}")

        def write(data: dict[str, Any]) -> None:
            try:
                data[key] = to_jsonable_python(value)
            except PydanticSerializationError as e:
                raise SettingsTypeError(f"Cannot serialize setting {key}: {e}") from e

        self._apply(write, write_back=True)

    def clear(self, key: str) -> None:
        """Remove the entry under `key`. Missing keys are ignored."""
        self._apply(lambda data: data.pop(key, None), write_back=True)

    def list_values(self) -> list[tuple[str, Any]]:
        """List every (key, value) entry in the document."""
        return self._apply(lambda data: list(data.items()), write_back=False)

    # ─────────────────────────────────────────────────────────────
    # Transaction
    # ─────────────────────────────────────────────────────────────

    def _apply(self, func: Callable[[dict[str, Any]], T], write_back: bool) -> T:
        """Load the document, run `func` on it and optionally write it back."""
        if self._file.closed:
            raise SettingsIOError(f"Settings store {self.path} is closed")

        try:
            self._file.seek(0)
            raw = self._file.read()
        except OSError as e:
            raise SettingsIOError(f"Cannot read settings file {self.path}: {e}") from e

        try:
            data = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            raise CorruptedError(f"Settings file {self.path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise CorruptedError(
                f"Root element of settings file {self.path} must be an object, got {type(data).__name__}"
            )

        result = func(data)

        if write_back:
            try:
                payload = json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False).encode("utf-8")
            except ValueError as e:
                raise SettingsTypeError(f"Cannot serialize settings: {e}") from e

            try:
                self._file.seek(0)
                self._file.truncate()
                self._file.write(payload)
                self._file.flush()
            except OSError as e:
                raise SettingsIOError(f"Cannot write settings file {self.path}: {e}") from e
            logger.debug("Wrote %d bytes to %s", len(payload), self.path)

        return result

    # ─────────────────────────────────────────────────────────────
    # Lifetime
    # ─────────────────────────────────────────────────────────────

    @property
    def closed(self) -> bool:
        return self._file.closed

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        self._file.close()

    def __enter__(self) -> "SettingsStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<SettingsStore {self.path} ({state})>"
