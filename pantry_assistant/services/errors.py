"""Errors raised by the assistant services."""


class AssistantUnavailableError(Exception):
    """The external model failed or returned nothing usable.

    Recoverable at the turn level: nothing was changed and the pending question
    (if any) is still in place, so the user can simply try again.
    """

    user_message = "Sorry, I couldn't process that. Please try again."

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
