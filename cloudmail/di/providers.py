"""
Providers: pre-built values and aliases between tokens.
"""

from typing import Any, Optional, Type

from .core import ProviderMeta, ResolveCtx, token_to_key


class ValueProvider:
    """Provider that returns a pre-bound constant value."""

    __slots__ = ("_meta", "_value")

    def __init__(
        self,
        value: Any,
        token: Type | str,
        name: Optional[str] = None,
        scope: str = "singleton",
        tags: tuple[str, ...] = (),
    ):
        self._value = value
        self._meta = ProviderMeta(
            name=name or "value",
            token=token_to_key(token),
            scope=scope,
            tags=tags,
            module=type(value).__module__,
            qualname=type(value).__qualname__,
        )

    @property
    def meta(self) -> ProviderMeta:
        return self._meta

    async def instantiate(self, ctx: ResolveCtx) -> Any:
        """Return pre-bound value."""
        return self._value

    async def shutdown(self) -> None:
        """No-op for value provider."""
        pass


class AliasProvider:
    """
    Provider that aliases one token to another.

    The alias never owns an instance: every resolution is forwarded to the
    target, so both tokens yield the same object.
    """

    __slots__ = ("_meta", "_target_token", "_target_tag")

    is_alias = True

    def __init__(
        self,
        token: Type | str,
        target_token: Type | str,
        target_tag: Optional[str] = None,
        name: Optional[str] = None,
    ):
        self._target_token = target_token
        self._target_tag = target_tag

        self._meta = ProviderMeta(
            name=name or f"alias:{token_to_key(target_token)}",
            token=token_to_key(token),
            scope="transient",
        )

    @property
    def meta(self) -> ProviderMeta:
        return self._meta

    @property
    def target(self) -> str:
        return token_to_key(self._target_token)

    async def instantiate(self, ctx: ResolveCtx) -> Any:
        """Resolve target token."""
        return await ctx.container.resolve_async(
            self._target_token,
            tag=self._target_tag,
        )

    async def shutdown(self) -> None:
        """No-op for alias provider."""
        pass
