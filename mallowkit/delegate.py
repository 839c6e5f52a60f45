"""Callable wrappers around bound methods, plain functions and closures.

A delegate either calls what it wraps or, when it is not fully bound,
quietly does nothing and returns ``None``. ``AnyDelegate`` holds a copy of
any delegate and falls back to a dummy that does nothing when it is empty.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Optional

__all__ = [
    "Delegate",
    "FunctionDelegate",
    "LambdaDelegate",
    "AnyDelegate",
    "make_lambda_delegate",
]


class _BaseDelegate:
    """Common interface of every delegate kind."""

    def invoke(self, *args: Any) -> Any:
        raise NotImplementedError

    def __call__(self, *args: Any) -> Any:
        return self.invoke(*args)

    def clone(self) -> "_BaseDelegate":
        """Return an independent copy of this delegate."""
        return copy.copy(self)

    def is_no_dummy(self) -> bool:
        """True for every delegate except the empty placeholder."""
        return True


class Delegate(_BaseDelegate):
    """Calls ``method(instance, *args)``, given an instance and an unbound method.

    If either is missing, calling it does nothing and returns ``None``.
    """

    def __init__(
        self,
        instance: Any = None,
        method: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.instance = instance
        self.method = method

    def bind(self, instance: Any, method: Callable[..., Any]) -> None:
        """Set both the instance and the method."""
        self.instance = instance
        self.method = method

    def invoke(self, *args: Any) -> Any:
        if self.instance is not None and self.method is not None:
            return self.method(self.instance, *args)
        return None

    def __call__(self, *args: Any) -> Any:
        return self.invoke(*args)

    def clone(self) -> "Delegate":
        return Delegate(self.instance, self.method)

    def is_no_dummy(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Delegate({self.instance!r}, {self.method!r})"


class FunctionDelegate(_BaseDelegate):
    """Calls a plain function; does nothing and returns ``None`` without one."""

    def __init__(self, function: Optional[Callable[..., Any]] = None) -> None:
        self.function = function

    def invoke(self, *args: Any) -> Any:
        if self.function is not None:
            return self.function(*args)
        return None

    def __call__(self, *args: Any) -> Any:
        return self.invoke(*args)

    def clone(self) -> "FunctionDelegate":
        return FunctionDelegate(self.function)

    def is_no_dummy(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"FunctionDelegate({self.function!r})"


class LambdaDelegate(_BaseDelegate):
    """Wraps any callable, closures included, and always calls it."""

    def __init__(self, function: Callable[..., Any]) -> None:
        if not callable(function):
            raise TypeError(f"{function!r} is not callable")
        self.function = function

    def invoke(self, *args: Any) -> Any:
        return self.function(*args)

    def __call__(self, *args: Any) -> Any:
        return self.invoke(*args)

    def clone(self) -> "LambdaDelegate":
        return LambdaDelegate(self.function)

    def is_no_dummy(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"LambdaDelegate({self.function!r})"


class _UnbindDummy(_BaseDelegate):
    """Placeholder stored in an empty ``AnyDelegate``."""

    def invoke(self, *args: Any) -> Any:
        return None

    def is_no_dummy(self) -> bool:
        return False


def make_lambda_delegate(function: Callable[..., Any]) -> LambdaDelegate:
    """Wrap ``function`` in a ``LambdaDelegate``."""
    return LambdaDelegate(function)


class AnyDelegate:
    """Holds a copy of any delegate; empty, it holds a dummy that does nothing."""

    def __init__(self, delegate: Optional[_BaseDelegate] = None) -> None:
        self._delegate: _BaseDelegate = _UnbindDummy()
        if delegate is not None:
            self.assign(delegate)

    def assign(self, delegate: _BaseDelegate) -> "AnyDelegate":
        """Store a copy of ``delegate`` in place of what was held."""
        if not isinstance(delegate, _BaseDelegate):
            raise TypeError(f"{delegate!r} is not a delegate")
        self._delegate = delegate.clone()
        return self

    @property
    def delegate(self) -> _BaseDelegate:
        """The delegate currently held."""
        return self._delegate

    def __call__(self, *args: Any) -> Any:
        return self._delegate.invoke(*args)

    def __bool__(self) -> bool:
        return self._delegate.is_no_dummy()

    def __repr__(self) -> str:
        return f"AnyDelegate({self._delegate!r})"