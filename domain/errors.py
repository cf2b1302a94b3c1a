"""Error kinds raised by the taxonomy core."""


class NotFoundError(KeyError):
    """An equipment type id is not present in the tree."""

    def __init__(self, node_id: object) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Unknown equipment type id: {self.node_id!r}"


class ParseError(ValueError):
    """Classifier output is not a well-formed classification object."""


class InvalidSelectionError(ValueError):
    """A cascade selection does not match the options offered at that level."""
