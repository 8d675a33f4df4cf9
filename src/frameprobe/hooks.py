# MIT License (see LICENSE)
"""
Hooks: profile existing callables without touching their call sites.

A HookRegistry replaces `container.member` with a wrapper that pushes an
event, calls the original and pops the event again. Containers are any
object with attributes: modules, classes, instances, namespaces.

Typical usage:
    hooks = HookRegistry(draw_probe)
    hooks.hook(Planet, "draw", "Planet")
    hooks.hook_all({"planet": planet, "fan": fan}, "update")
    ...
    hooks.unhook_all()
"""
from __future__ import annotations
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from .probe import Probe
from .types import EventKey

logger = logging.getLogger(__name__)


@dataclass
class _Hook:
    container: Any
    member: str
    # Raw attribute as stored on the container (staticmethod and
    # classmethod descriptors included), restored verbatim on unhook.
    original: Any
    # False when the member was inherited (e.g. a method looked up on an
    # instance), so unhooking deletes the wrapper instead of setting it.
    owned: bool
    key: EventKey
    label: str


def _owns(container: Any, member: str) -> bool:
    try:
        return member in vars(container)
    except TypeError:
        return True


def _lookup(container: Any, member: str) -> tuple[Any, Any, type | None]:
    """
    Raw attribute, callable to wrap, and descriptor type to re-apply.

    On classes the attribute is read without invoking the descriptor
    protocol, so staticmethods and classmethods keep their binding.
    """
    if not isinstance(container, type):
        func = getattr(container, member, None)
        return func, func, None
    try:
        raw = inspect.getattr_static(container, member)
    except AttributeError:
        return None, None, None
    if isinstance(raw, (staticmethod, classmethod)):
        return raw, raw.__func__, type(raw)
    return raw, raw, None


class HookRegistry:
    """
    Installs and removes profiling wrappers for one probe.

    Attributes:
        probe: The probe events are pushed on.
    """

    def __init__(self, probe: Probe) -> None:
        self.probe = probe
        self._hooks: list[_Hook] = []

    def _find(self, container: Any, member: str) -> _Hook | None:
        for h in self._hooks:
            if h.container is container and h.member == member:
                return h
        return None

    def hook(
        self,
        container: Any,
        member: str,
        parent_name: str | None = None,
        key: EventKey | None = None,
    ) -> EventKey:
        """
        Turn `container.member` into a profiled event.

        Args:
            container: Object holding the callable.
            member: Attribute name of the callable.
            parent_name: Name of the container, used in the label.
                         Optional but recommended.
            key: Event key; defaults to the label "parent.member()".

        Returns:
            The event key the wrapper pushes.

        Raises:
            TypeError: If the member is not callable.
            ValueError: If the member is already hooked by this registry.
        """
        label = f"{parent_name or ''}.{member}()"
        original, func, descriptor = _lookup(container, member)
        if not callable(func):
            raise TypeError(f"{label} is not a function")
        if self._find(container, member) is not None:
            raise ValueError(f"{label} is already hooked")
        if key is None:
            key = label

        probe = self.probe

        @functools.wraps(func)
        def call(*args, **kwargs):
            probe.push_event(key)
            try:
                return func(*args, **kwargs)
            finally:
                probe.pop_event()

        wrapper = descriptor(call) if descriptor is not None else call
        owned = _owns(container, member)
        setattr(container, member, wrapper)
        self._hooks.append(_Hook(container, member, original, owned, key, label))
        probe.name_event(key, label)
        logger.info("Hooked: %s", label)
        return key

    def hook_all(
        self,
        containers: Mapping[str, Any],
        member: str,
        exclude: Iterable[Any] = (),
    ) -> list[EventKey]:
        """
        Hook `member` on every container of an explicit registration list.

        Containers lacking a callable `member` are skipped.

        Args:
            containers: Mapping of display name to container.
            member: Attribute name to hook on each container.
            exclude: Containers to leave alone (compared by identity).

        Returns:
            Keys of the hooked events, in registration order.
        """
        excluded = list(exclude)
        keys = []
        for name, container in containers.items():
            if any(container is e for e in excluded):
                continue
            if not callable(getattr(container, member, None)):
                continue
            if self._find(container, member) is not None:
                continue
            keys.append(self.hook(container, member, name))
        return keys

    def unhook(self, container: Any) -> None:
        """Remove all hooks placed on members of `container`."""
        keep = []
        for h in self._hooks:
            if h.container is not container:
                keep.append(h)
                continue
            if h.owned:
                setattr(container, h.member, h.original)
            else:
                delattr(container, h.member)
            logger.info("Unhooked: %s from %r", h.member, container)
        self._hooks = keep

    def unhook_all(self) -> None:
        for container in {id(h.container): h.container for h in self._hooks}.values():
            self.unhook(container)

    def hooked(self) -> list[tuple[Any, str, EventKey]]:
        """(container, member, key) for every installed hook."""
        return [(h.container, h.member, h.key) for h in self._hooks]
