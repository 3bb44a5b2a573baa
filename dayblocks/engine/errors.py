"""Domain errors raised by the planner core."""


class BlockNotFoundError(LookupError):
    """A mutation referenced a block id the store does not hold."""

    def __init__(self, block_id: str):
        super().__init__(f"Block {block_id} not found")
        self.block_id = block_id


class TemplateNotFoundError(LookupError):
    """A template id is not in the session's template collection."""

    def __init__(self, template_id: str):
        super().__init__(f"Template {template_id} not found")
        self.template_id = template_id


class InvalidDurationError(ValueError):
    """A duration was non-positive or not aligned to the snap unit."""


class ConfigurationError(ValueError):
    """The day window cannot be divided into whole grid slots."""
