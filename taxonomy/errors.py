"""Exceptions raised by the taxonomy package."""


class TaxonomyError(Exception):
    """Base class for taxonomy failures."""


class TaxonomyLoadError(TaxonomyError):
    """The taxonomy dataset could not be read or validated."""


class TaxonomyIntegrityError(TaxonomyError):
    """The parent graph is inconsistent (a cycle was found while walking it)."""

    def __init__(self, category_id: str, message: str | None = None) -> None:
        self.category_id = category_id
        super().__init__(
            message or f"Parent chain of category {category_id!r} contains a cycle"
        )
