"""Template store adapters.

The engine reads template bodies through a two-method interface,
``read_body(path)`` and ``exists(path)``, where ``path`` is a forward-slash
path relative to the template root (``"saas/main-prompt.md"``).  Any failure
to read surfaces as ``TemplateReadError`` with the original message.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from .errors import TemplateReadError


_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateStore(Protocol):
    """Anything that can serve template bodies by relative path."""

    def read_body(self, path: str) -> str: ...

    def exists(self, path: str) -> bool: ...


def read_template(store: TemplateStore, path: str) -> str:
    """Read *path* from any store, normalising I/O failures.

    Stores supplied by a host may raise plain ``OSError`` or
    ``UnicodeDecodeError``; those become ``TemplateReadError`` with the
    original message.
    """
    try:
        return store.read_body(path)
    except TemplateReadError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateReadError(path, str(exc)) from exc


class FileTemplateStore:
    """Serves template bodies from a directory on disk."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)

    def _resolve(self, path: str) -> Path:
        return self.template_dir / Path(*path.split("/"))

    def read_body(self, path: str) -> str:
        try:
            return self._resolve(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateReadError(path, str(exc)) from exc

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()


class InMemoryTemplateStore:
    """Serves template bodies from a ``{path: body}`` mapping.

    Handy for tests and for hosts that keep templates somewhere other than
    the file system.
    """

    def __init__(self, bodies: Mapping[str, str] | None = None) -> None:
        self.bodies: dict[str, str] = dict(bodies or {})

    def read_body(self, path: str) -> str:
        try:
            return self.bodies[path]
        except KeyError:
            raise TemplateReadError(path, f"template body not found: {path}") from None

    def exists(self, path: str) -> bool:
        return path in self.bodies
