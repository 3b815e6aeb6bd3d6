"""Error taxonomy for the debrief pipeline."""


class DebriefError(Exception):
    """Base class for all pipeline errors."""


class StoreUnavailable(DebriefError):
    """Task store or user directory could not be reached or read."""


class GenerationError(DebriefError):
    """Summary generation failed or returned output that does not validate."""


class DeliveryFailure(DebriefError):
    """The messaging channel rejected the message or could not be reached."""

    def __init__(self, reason: str, *, rejected: bool = False) -> None:
        # rejected: the channel answered ok:false, as opposed to a transport error
        self.reason = reason
        self.rejected = rejected
        super().__init__(reason)


class ConfigurationMissing(DebriefError):
    """Required configuration is absent. Fatal at startup."""

    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        super().__init__(
            "Missing required configuration: " + ", ".join(self.names)
        )
