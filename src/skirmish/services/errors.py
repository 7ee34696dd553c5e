"""Service-layer exceptions."""


class EngineError(Exception):
    """Base class for combat engine failures that are not narrated."""


class FactoryError(EngineError):
    """Raised when a runtime actor cannot be created."""
