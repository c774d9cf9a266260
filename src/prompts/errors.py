"""Exception hierarchy for the prompt generation engine.

Components raise these; ``PromptEngine`` catches them at its boundary and
turns them into a failed ``RenderResult``.
"""

from __future__ import annotations


class PromptEngineError(Exception):
    """Base class for every error raised by the prompt engine."""


class TemplateNotFoundError(PromptEngineError):
    """No template is registered for the requested project type."""

    def __init__(self, archetype: str) -> None:
        self.archetype = archetype
        super().__init__(f"no template found for project type: {archetype}")


class TemplateReadError(PromptEngineError):
    """The template store failed to read a body.

    The underlying message is kept verbatim so callers see the real cause.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class TemplateSyntaxError(PromptEngineError):
    """A template has unmatched, mismatched or unknown block directives."""

    def __init__(self, message: str, tag: str = "", position: int = -1) -> None:
        self.tag = tag
        self.position = position
        if position >= 0:
            message = f"{message} (at offset {position})"
        super().__init__(message)
