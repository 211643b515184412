from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, TypeVar

V = TypeVar("V")
Values = TypeVar("Values")
Child = TypeVar("Child")
Parent = TypeVar("Parent")


@dataclass(frozen=True)
class Lens(Generic[Parent, Child]):
    """Getter and setter focusing on one slice of a larger value.

    ``update`` receives the new slice and the whole value it belongs to and
    returns the new whole value; it must leave every other slice untouched.
    """
    value: Callable[[Parent], Child]
    update: Callable[[Child, Parent], Parent]

    def compose(self, inner: "Lens") -> "Lens":
        """Focus further: ``self`` selects the child, ``inner`` a slice of it."""
        return Lens(
            value=lambda parent: inner.value(self.value(parent)),
            update=lambda slice_, parent: self.update(inner.update(slice_, self.value(parent)), parent),
        )

    @classmethod
    def key(cls, name: str) -> "Lens":
        """Lens over one key of a dict, copying the dict on update."""
        return cls(
            value=lambda parent: parent[name],
            update=lambda child, parent: {**parent, name: child},
        )

    @classmethod
    def attribute(cls, name: str) -> "Lens":
        """Lens over one field of a frozen dataclass."""
        return cls(
            value=lambda parent: getattr(parent, name),
            update=lambda child, parent: replace(parent, **{name: child}),
        )


@dataclass(frozen=True)
class BaseField(Generic[V, Values]):
    """Read and write access to one field's value inside the form values.

    ``update`` is bound to the values the field was filled with, which is what
    synchronous edits want. Asynchronous completions must use
    ``update_with_values`` with the values current at completion time so
    edits made in the meantime are kept.
    """
    value: V
    get_value: Callable[[Values], V]
    update: Callable[[V], Values]
    update_with_values: Callable[[V, Values], Values]

    def lift(self, lens: Lens, parent: Any) -> "BaseField":
        return BaseField(
            value=self.value,
            get_value=lambda whole: self.get_value(lens.value(whole)),
            update=lambda v: lens.update(self.update(v), parent),
            update_with_values=lambda v, whole: lens.update(
                self.update_with_values(v, lens.value(whole)), whole
            ),
        )
