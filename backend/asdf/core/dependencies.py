"""Service container with lazy, memoized, dependency-aware resolution.

This module provides the dependency injection container used by the ASDF
backend. Services are registered under string identifiers together with a
factory; the factory runs the first time the service is requested and its
result is cached for the lifetime of the container.

Design Principles:
- One explicit container per application entry point (no hidden globals)
- Factories receive the container and pull their dependencies by id
- Circular resolution chains fail immediately with the offending chain
- Registration can be frozen once bootstrap has finished
- Failed resolutions are never cached, so a fixed factory can be retried

Quick Start:
    container = ServiceContainer()
    container.constant("api_base", "https://asdf-api.onrender.com/api")
    container.set("client", lambda c: ApiClient(c.get("api_base")))
    container.lock()

    client = container.get("client")

Architecture:
- ServiceEntry: Registry record for one service id
- ServiceContainer: Registration, resolution and lock state
- ContainerError and subclasses: Failure taxonomy callers can discriminate

Thread Safety:
    A single re-entrant lock guards registration and resolution. A factory
    calling back into ``get`` on the same thread re-enters the lock, while
    other threads wait until the resolution finishes and then observe the
    cached value, so each factory runs at most once.
"""

import threading
from collections.abc import Callable, Iterable
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, TypeVar

from asdf.core.enums import ServiceState
from asdf.core.errors import ApplicationError, ErrorSeverity, NotFoundError
from asdf.core.logging import get_logger

logger = get_logger(__name__)
T = TypeVar("T")

Factory = Callable[["ServiceContainer"], Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =====================================================================================
# EXCEPTION CLASSES
# =====================================================================================


class ContainerError(ApplicationError):
    """Base class for service container errors."""

    default_code = "CONTAINER_ERROR"
    severity = ErrorSeverity.HIGH


class ServiceNotFoundError(NotFoundError):
    """Requested service id has no registration."""

    default_code = "SERVICE_NOT_FOUND"

    def __init__(self, service_id: str, **kwargs: Any) -> None:
        super().__init__("Service", service_id, **kwargs)
        self.service_id = service_id


class ContainerLockedError(ContainerError):
    """Registration attempted after the container was locked."""

    default_code = "CONTAINER_LOCKED"

    @classmethod
    def cannot_register(cls, service_id: str) -> "ContainerLockedError":
        """Create exception for a registration after lock."""
        return cls(
            f"Container is locked, cannot register '{service_id}'",
            details={"service_id": service_id},
            recovery_hint="Register services before the container is locked",
        )


class CircularDependencyError(ContainerError):
    """Resolution chain re-entered a service that is still resolving."""

    default_code = "CIRCULAR_DEPENDENCY"

    def __init__(self, message: str, chain: list[str] | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.chain = list(chain or [])
        self.details["chain"] = self.chain

    @classmethod
    def detected_in_chain(cls, chain: list[str]) -> "CircularDependencyError":
        """Create exception for a cycle; the last id closes the loop."""
        return cls(
            f"Circular dependency detected: {' -> '.join(chain)}",
            chain=chain,
        )


class ServiceRegistrationError(ContainerError):
    """Registration arguments are invalid."""

    default_code = "SERVICE_REGISTRATION_ERROR"

    @classmethod
    def invalid_id(cls, service_id: Any) -> "ServiceRegistrationError":
        """Create exception for an empty or non-string id."""
        return cls(
            f"Service id must be a non-empty string, got {service_id!r}",
            details={"service_id": repr(service_id)},
        )

    @classmethod
    def invalid_factory(cls, service_id: str) -> "ServiceRegistrationError":
        """Create exception for a factory that is not callable."""
        return cls(
            f"Factory for '{service_id}' must be callable",
            details={"service_id": service_id},
        )


class ServiceTypeError(ContainerError):
    """Resolved service does not have the type the caller expected."""

    default_code = "SERVICE_TYPE_MISMATCH"

    @classmethod
    def unexpected_type(
        cls, service_id: str, expected: type, actual: type
    ) -> "ServiceTypeError":
        """Create exception for a typed lookup mismatch."""
        return cls(
            f"Service '{service_id}' expected type {expected.__name__} "
            f"but got {actual.__name__}",
            details={
                "service_id": service_id,
                "expected": expected.__name__,
                "actual": actual.__name__,
            },
        )


# =====================================================================================
# SERVICE ENTRY
# =====================================================================================


@dataclass
class ServiceEntry:
    """
    Registry record for one service id.

    Constants carry no factory; they are stored already resolved.
    """

    service_id: str
    factory: Factory | None
    is_constant: bool = field(default=False)
    value: Any = field(default=None)
    state: ServiceState = field(default=ServiceState.UNRESOLVED)

    registration_time: datetime = field(default_factory=_utcnow)
    resolved_time: datetime | None = field(default=None)
    error_count: int = field(default=0)

    @property
    def is_resolved(self) -> bool:
        return self.is_constant or self.state.is_available

    def to_dict(self) -> dict[str, Any]:
        """Convert entry metadata (never the value) to a dictionary."""
        return {
            "service_id": self.service_id,
            "is_constant": self.is_constant,
            "state": self.state.value,
            "registration_time": self.registration_time.isoformat(),
            "resolved_time": self.resolved_time.isoformat()
            if self.resolved_time
            else None,
            "error_count": self.error_count,
        }


# =====================================================================================
# MAIN CONTAINER CLASS
# =====================================================================================


class ServiceContainer:
    """
    Keyed registry of lazily-built, memoized services.

    Lifecycle:
        1. Bootstrap: register services with ``set`` and ``constant``
        2. ``lock`` (or ``boot``) freezes the registry
        3. Runtime: ``get`` resolves services on demand

    Resolution:
        ``get`` consults the per-entry state. A resolved entry or constant
        returns its cached value; an entry that is already resolving means
        the current chain looped back on itself; otherwise the factory runs
        with the container as its only argument. Diamond dependencies
        resolve the shared service once.
    """

    def __init__(self, thread_safe: bool = True):
        """
        Initialize an empty container.

        Args:
            thread_safe: Guard registration and resolution with an RLock
        """
        self._lock = threading.RLock() if thread_safe else None
        self._entries: dict[str, ServiceEntry] = {}
        self._resolving: list[str] = []
        self._locked = False

    # =====================================================================================
    # REGISTRATION
    # =====================================================================================

    def set(self, service_id: str, factory: Factory) -> "ServiceContainer":
        """
        Register a lazily-built service.

        Re-registering an id replaces its factory and discards any cached
        value; the id keeps its original position in ``keys()``.

        Args:
            service_id: Unique service identifier
            factory: Callable receiving the container and returning the service

        Returns:
            ServiceContainer: self, for chaining

        Raises:
            ContainerLockedError: If the container is locked
            ServiceRegistrationError: If the id or factory is invalid
        """
        with self._get_lock():
            self._ensure_unlocked(service_id)
            self._validate_service_id(service_id)
            if not callable(factory):
                raise ServiceRegistrationError.invalid_factory(service_id)

            self._warn_if_overwriting(service_id)
            self._entries[service_id] = ServiceEntry(
                service_id=service_id, factory=factory
            )

        logger.debug("Service registered", service_id=service_id)
        return self

    def constant(self, service_id: str, value: Any) -> "ServiceContainer":
        """
        Register a fixed value that is never built by a factory.

        Args:
            service_id: Unique service identifier
            value: Value returned by every ``get``

        Returns:
            ServiceContainer: self, for chaining

        Raises:
            ContainerLockedError: If the container is locked
            ServiceRegistrationError: If the id is invalid
        """
        with self._get_lock():
            self._ensure_unlocked(service_id)
            self._validate_service_id(service_id)

            self._warn_if_overwriting(service_id)
            self._entries[service_id] = ServiceEntry(
                service_id=service_id,
                factory=None,
                is_constant=True,
                value=value,
                state=ServiceState.RESOLVED,
            )

        logger.debug("Constant registered", service_id=service_id)
        return self

    def lock(self) -> "ServiceContainer":
        """Forbid further registration. Calling it again is a no-op."""
        with self._get_lock():
            if self._locked:
                return self
            self._locked = True
            registered = len(self._entries)

        logger.debug("Container locked", registered=registered)
        return self

    def boot(self, eager: Iterable[str] = ()) -> "ServiceContainer":
        """
        Resolve the given services up front, then lock the container.

        Ids that are not registered are skipped.

        Args:
            eager: Service ids to resolve before locking
        """
        for service_id in eager:
            if self.has(service_id):
                self.get(service_id)
            else:
                logger.warning("Skipping unknown eager service", service_id=service_id)

        return self.lock()

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def thread_safe(self) -> bool:
        """Whether registration and resolution are serialized by a lock."""
        return self._lock is not None

    # =====================================================================================
    # RESOLUTION
    # =====================================================================================

    def get(self, service_id: str) -> Any:
        """
        Resolve a service, building it on first request.

        Args:
            service_id: Service identifier

        Returns:
            The cached or newly built service value

        Raises:
            ServiceNotFoundError: If the id is not registered
            CircularDependencyError: If the id is already mid-resolution
            Exception: Whatever the factory raised, unchanged
        """
        with self._get_lock():
            entry = self._entries.get(service_id)
            if entry is None:
                raise ServiceNotFoundError(service_id)

            if entry.is_resolved:
                return entry.value

            if entry.state.in_progress:
                raise CircularDependencyError.detected_in_chain(
                    self._cycle_from(service_id)
                )

            return self._resolve(entry)

    def get_typed(self, service_id: str, expected_type: type[T]) -> T:
        """
        Resolve a service and check it is an instance of ``expected_type``.

        Raises:
            ServiceTypeError: If the resolved value has another type
        """
        value = self.get(service_id)
        if not isinstance(value, expected_type):
            raise ServiceTypeError.unexpected_type(
                service_id, expected_type, type(value)
            )
        return value

    def has(self, service_id: str) -> bool:
        """Check whether ``service_id`` is registered (resolved or not)."""
        with self._get_lock():
            return service_id in self._entries

    def __contains__(self, service_id: object) -> bool:
        return self.has(service_id)

    def __len__(self) -> int:
        return len(self._entries)

    # =====================================================================================
    # INTROSPECTION
    # =====================================================================================

    def keys(self) -> list[str]:
        """Registered ids in registration order."""
        with self._get_lock():
            return list(self._entries)

    def stats(self) -> dict[str, Any]:
        """
        Snapshot of the container state.

        Returns:
            dict with ``registered`` (all entries), ``resolved`` (resolved
            entries and constants) and ``locked``
        """
        with self._get_lock():
            return {
                "registered": len(self._entries),
                "resolved": sum(
                    1 for entry in self._entries.values() if entry.is_resolved
                ),
                "locked": self._locked,
            }

    def get_service_info(self, service_id: str) -> dict[str, Any] | None:
        """Registration metadata for ``service_id``, or None if unknown."""
        with self._get_lock():
            entry = self._entries.get(service_id)
            return entry.to_dict() if entry else None

    def __repr__(self) -> str:
        stats = self.stats()
        return (
            f"ServiceContainer(registered={stats['registered']}, "
            f"resolved={stats['resolved']}, locked={stats['locked']})"
        )

    # =====================================================================================
    # PRIVATE IMPLEMENTATION METHODS
    # =====================================================================================

    def _get_lock(self):
        """Get thread lock if thread safety is enabled."""
        if self._lock:
            return self._lock
        return nullcontext()

    def _resolve(self, entry: ServiceEntry) -> Any:
        entry.state = ServiceState.RESOLVING
        self._resolving.append(entry.service_id)
        try:
            value = entry.factory(self)
        except BaseException:
            # Not cached: the next get re-runs the factory
            entry.state = ServiceState.UNRESOLVED
            entry.error_count += 1
            raise
        finally:
            self._resolving.pop()

        entry.value = value
        entry.state = ServiceState.RESOLVED
        entry.resolved_time = _utcnow()

        logger.debug(
            "Service resolved",
            service_id=entry.service_id,
            depth=len(self._resolving),
        )
        return value

    def _cycle_from(self, service_id: str) -> list[str]:
        """Resolution chain from the first occurrence of ``service_id``."""
        if service_id in self._resolving:
            start = self._resolving.index(service_id)
            return [*self._resolving[start:], service_id]
        return [*self._resolving, service_id]

    def _ensure_unlocked(self, service_id: str) -> None:
        if self._locked:
            raise ContainerLockedError.cannot_register(service_id)

    def _validate_service_id(self, service_id: Any) -> None:
        if not isinstance(service_id, str) or not service_id:
            raise ServiceRegistrationError.invalid_id(service_id)

    def _warn_if_overwriting(self, service_id: str) -> None:
        existing = self._entries.get(service_id)
        if existing is None:
            return

        logger.warning(
            "Overwriting service registration",
            service_id=service_id,
            was_constant=existing.is_constant,
            was_resolved=existing.is_resolved,
        )


# =====================================================================================
# EXPORTS
# =====================================================================================

__all__ = [
    "CircularDependencyError",
    "ContainerError",
    "ContainerLockedError",
    "Factory",
    "ServiceContainer",
    "ServiceEntry",
    "ServiceNotFoundError",
    "ServiceRegistrationError",
    "ServiceTypeError",
]
