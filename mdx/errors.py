"""Exceptions raised by the content pipeline."""


class ContentError(Exception):
    """Base class for content loading and rendering failures."""


class FrontmatterError(ContentError):
    """The YAML frontmatter block could not be parsed or validated."""


class ComponentError(ContentError):
    """A custom component was used with invalid attributes."""


class UnknownComponentError(ComponentError):
    """A component tag names something outside the supported set."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown component <{name}>")
