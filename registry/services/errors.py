"""Error kinds raised by the registry core.

Routers translate these into HTTP responses (see ``registry.main``); the core
itself never retries and never leaves a partial mutation behind when one of
these is raised.
"""


class RegistryError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RegistryError):
    status_code = 400


class Unauthorized(RegistryError):
    status_code = 403


class NotFound(RegistryError):
    status_code = 404


class InvalidTransition(RegistryError):
    status_code = 409

    def __init__(self, current, event: str):
        current_value = getattr(current, "value", current)
        super().__init__(f"Cannot {event} an item in status {current_value}")
        self.current = current
        self.event = event


class ConversationClosed(RegistryError):
    status_code = 409

    def __init__(self, message: str = "Conversation is closed, the case has been resolved"):
        super().__init__(message)


class ConcurrentModification(RegistryError):
    status_code = 409

    def __init__(self, message: str = "Item was modified by another request, reload and try again"):
        super().__init__(message)
