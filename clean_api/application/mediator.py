"""
Request/handler dispatch for the application layer.

Handlers register against the request type they serve. A :class:`Mediator`
bound to one unit of work builds the matching handler and runs it.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from ..logging_config import get_logger
from ..persistence.unit_of_work import UnitOfWork

logger = get_logger(__name__)

TRequest = TypeVar("TRequest")
TResponse = TypeVar("TResponse")

HandlerFactory = Callable[[UnitOfWork], "RequestHandler[Any, Any]"]

_registry: Dict[type, HandlerFactory] = {}


class RequestHandler(ABC, Generic[TRequest, TResponse]):
    """Handles exactly one request type."""

    @abstractmethod
    async def handle(self, request: TRequest) -> TResponse:
        pass


def handles(request_type: type, factory: Callable[[UnitOfWork], RequestHandler]) -> None:
    """
    Register a handler factory for a request type.

    Args:
        request_type: Command or query class
        factory: Callable building the handler from a unit of work

    Raises:
        ValueError: If the request type already has a handler
    """
    if request_type in _registry:
        raise ValueError(f"Handler already registered for {request_type.__name__}")
    _registry[request_type] = factory


def registered_requests() -> Dict[type, HandlerFactory]:
    return dict(_registry)


class Mediator:
    """Dispatches commands and queries to their handlers."""

    def __init__(self, uow: UnitOfWork, registry: Optional[Dict[type, HandlerFactory]] = None):
        self._uow = uow
        self._registry = registry if registry is not None else _registry

    async def send(self, request: Any) -> Any:
        """
        Run the handler registered for ``type(request)``.

        Raises:
            LookupError: If no handler is registered for the request type
        """
        factory = self._registry.get(type(request))
        if factory is None:
            raise LookupError(f"No handler registered for {type(request).__name__}")

        handler = factory(self._uow)
        logger.debug("Dispatching request", request=type(request).__name__)
        return await handler.handle(request)
