"""
Core DI types and protocols.

Defines the fundamental contracts for the DI system.
"""

from typing import (
    Any,
    Dict,
    List,
    Optional,
    Protocol,
    Type,
    TypeVar,
    runtime_checkable,
)
from dataclasses import dataclass, field

# Module-level cache: type -> "module.qualname" string
_type_key_cache: Dict[type, str] = {}

# Scopes that should cache instances
_CACHEABLE_SCOPES = frozenset(("singleton", "app"))


T = TypeVar("T")


def token_to_key(token: Any) -> str:
    """Convert a type or string token to its registry key."""
    if isinstance(token, str):
        return token

    if isinstance(token, type):
        key = _type_key_cache.get(token)
        if key is None:
            key = f"{token.__module__}.{token.__qualname__}"
            _type_key_cache[token] = key
        return key

    # typing generics and other objects
    return str(token)


@dataclass(frozen=True, slots=True)
class ProviderMeta:
    """Identity of a registered provider."""
    name: str
    token: str  # Type name or string key
    scope: str  # "singleton", "app", "transient"
    tags: tuple[str, ...] = field(default_factory=tuple)
    module: str = ""
    qualname: str = ""


class ResolveCtx:
    """
    Context for resolution operations.

    Tracks the resolution stack for diagnostics.
    """
    __slots__ = ("container", "stack")

    def __init__(self, container: "Container"):
        self.container = container
        self.stack: List[str] = []

    def push(self, token: str) -> None:
        self.stack.append(token)

    def pop(self) -> None:
        self.stack.pop()


@runtime_checkable
class Provider(Protocol):
    """
    Provider protocol - how to instantiate a dependency.
    """

    @property
    def meta(self) -> ProviderMeta:
        """Provider metadata."""
        ...

    async def instantiate(self, ctx: ResolveCtx) -> Any:
        """
        Instantiate the provider.

        Args:
            ctx: Resolution context with container and stack

        Returns:
            The instantiated object
        """
        ...

    async def shutdown(self) -> None:
        """Shutdown hook for cleanup."""
        ...


class Container:
    """
    DI Container - manages provider instances.

    Registration is synchronous and happens during context refresh;
    resolution is async so factories may await.
    """

    __slots__ = (
        "_providers",
        "_cache",
        "_scope",
        "_diagnostics",
        "_lifecycle",
    )

    def __init__(
        self,
        scope: str = "app",
        diagnostics: Optional[Any] = None,
    ):
        from .diagnostics import DIDiagnostics
        from .lifecycle import Lifecycle

        self._providers: Dict[str, Provider] = {}  # {cache_key: provider}
        self._cache: Dict[str, Any] = {}  # {cache_key: instance}
        self._scope = scope
        self._diagnostics = diagnostics or DIDiagnostics()
        self._lifecycle = Lifecycle()

    @property
    def diagnostics(self) -> Any:
        return self._diagnostics

    def register(self, provider: Provider, tag: Optional[str] = None):
        """
        Register a provider.

        Args:
            provider: Provider instance
            tag: Optional tag for disambiguation

        Raises:
            DuplicateProviderError: A different provider owns the token
        """
        meta = provider.meta
        token = meta.token
        key = self._make_cache_key(token, tag)

        if key in self._providers:
            existing = self._providers[key]
            # Idempotency: if same provider, ignore. If different, error.
            if existing is provider:
                return
            from .errors import DuplicateProviderError
            raise DuplicateProviderError(token, tag, existing)

        self._providers[key] = provider

        from .diagnostics import DIEventType
        self._diagnostics.emit(
            DIEventType.REGISTRATION,
            token=token,
            tag=tag,
            provider_name=meta.name,
        )

    async def resolve_async(
        self,
        token: Type[T] | str,
        *,
        tag: Optional[str] = None,
        optional: bool = False,
    ) -> T:
        """
        Resolve a dependency.

        Args:
            token: Type or string key
            tag: Optional tag for disambiguation
            optional: If True, return None if not found instead of raising

        Raises:
            ProviderNotFoundError: If provider not found and not optional
        """
        token_key = token_to_key(token)
        cache_key = self._make_cache_key(token_key, tag)

        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        provider = self._providers.get(cache_key)
        if provider is None:
            if optional:
                return None
            self._raise_not_found(token_key, tag)

        return await self._instantiate(cache_key, provider)

    async def resolve_named(self, name: str, *, optional: bool = False) -> Any:
        """
        Resolve the provider registered under ``name``.

        Aliases are not names of their own: they point at another provider.
        """
        found = self.find_by_name(name)
        if found is None:
            if optional:
                return None
            self._raise_not_found(name, None)
        cache_key, provider = found

        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached
        return await self._instantiate(cache_key, provider)

    async def _instantiate(self, cache_key: str, provider: Provider) -> Any:
        from .diagnostics import DIEventType

        ctx = ResolveCtx(container=self)
        ctx.push(cache_key)
        try:
            instance = await provider.instantiate(ctx)
        except Exception as e:
            self._diagnostics.emit(
                DIEventType.RESOLUTION_FAILURE,
                token=cache_key,
                provider_name=provider.meta.name,
                error=e,
                metadata={"stack": list(ctx.stack)},
            )
            raise
        finally:
            ctx.pop()

        if provider.meta.scope in _CACHEABLE_SCOPES:
            self._cache[cache_key] = instance
            self._register_finalizer(instance, provider.meta.name)

        self._diagnostics.emit(
            DIEventType.RESOLUTION_SUCCESS,
            token=cache_key,
            provider_name=provider.meta.name,
        )
        return instance

    def is_registered(self, token: Type[T] | str, tag: Optional[str] = None) -> bool:
        """Check if a provider is registered for the token."""
        key = self._make_cache_key(token_to_key(token), tag)
        return key in self._providers

    def count(self, token: Type[T] | str) -> int:
        """Number of registrations for the token across all tags."""
        token_key = token_to_key(token)
        return sum(
            1 for key in self._providers
            if key == token_key or key.startswith(f"{token_key}#")
        )

    def find_by_name(self, name: str) -> Optional[tuple[str, Provider]]:
        """
        Find the (cache_key, provider) pair registered under a provider name.

        Raises:
            AmbiguousProviderError: Several non-alias providers share the name
        """
        matches = [
            (key, provider)
            for key, provider in self._providers.items()
            if provider.meta.name == name and not getattr(provider, "is_alias", False)
        ]
        if not matches:
            return None
        if len(matches) > 1:
            from .errors import AmbiguousProviderError
            raise AmbiguousProviderError(name, [key for key, _ in matches])
        return matches[0]

    def names(self) -> List[str]:
        """Names of all registered (non-alias) providers."""
        return [
            p.meta.name for p in self._providers.values()
            if not getattr(p, "is_alias", False)
        ]

    def providers(self) -> Dict[str, Provider]:
        """Snapshot of registered providers by cache key."""
        return dict(self._providers)

    async def shutdown(self) -> None:
        """
        Shutdown container - run finalizers in LIFO order.
        """
        from .diagnostics import DIEventType
        self._diagnostics.emit(DIEventType.LIFECYCLE_SHUTDOWN, metadata={"scope": self._scope})

        await self._lifecycle.run_finalizers()

        for provider in self._providers.values():
            await provider.shutdown()

        self._cache.clear()
        self._lifecycle.clear()

    def _make_cache_key(self, token: str, tag: Optional[str]) -> str:
        """Create cache key from token and tag."""
        if tag:
            return f"{token}#{tag}"
        return token

    def _register_finalizer(self, instance: Any, name: str) -> None:
        """Register finalizer for cleanup."""
        if hasattr(instance, "__aexit__"):
            self._lifecycle.register_finalizer(
                lambda: instance.__aexit__(None, None, None), name=name,
            )
        elif hasattr(instance, "shutdown"):
            self._lifecycle.register_finalizer(instance.shutdown, name=name)

    def _raise_not_found(self, token: str, tag: Optional[str]) -> None:
        """Raise ProviderNotFoundError with helpful diagnostics."""
        from .errors import ProviderNotFoundError

        candidates = [key for key in self._providers if token in key]

        raise ProviderNotFoundError(
            token=token,
            tag=tag,
            candidates=candidates,
        )
