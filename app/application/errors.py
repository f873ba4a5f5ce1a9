"""Application error taxonomy."""


class ConversationNotFoundError(Exception):
    """Raised when a referenced conversation id does not exist."""

    def __init__(self, conversation_id: int) -> None:
        self.conversation_id = conversation_id
        super().__init__(f"Conversation {conversation_id} not found")


class UpstreamUnavailableError(Exception):
    """Raised when the pharmacy directory or the LLM cannot be reached or fails."""


class MalformedFunctionArgumentsError(ValueError):
    """Raised when a model function call carries arguments that cannot be parsed."""

    def __init__(self, function_name: str, reason: str) -> None:
        self.function_name = function_name
        self.reason = reason
        super().__init__(f"Malformed arguments for {function_name}: {reason}")


class UnknownFunctionError(ValueError):
    """Raised when a model function call names a function that is not supported."""

    def __init__(self, function_name: str) -> None:
        self.function_name = function_name
        super().__init__(f"Unknown function: {function_name}")
