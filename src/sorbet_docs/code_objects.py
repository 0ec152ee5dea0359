"""Documentation object models.

Objects are identified by their path:
- namespaces and constants: `Outer::Inner`, `Outer::CONSTANT`
- instance methods: `Outer::Inner#name`
- class methods: `Outer::Inner.name`
The root namespace has the empty path.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Scope = Literal["instance", "class"]
Visibility = Literal["public", "protected", "private"]

NAMESPACE_SEPARATOR = "::"
ROOT_PATH = ""

_WHITESPACE = re.compile(r"\s+")


def join_path(namespace: str, name: str) -> str:
    """Build the path of a namespace member."""
    return f"{namespace}{NAMESPACE_SEPARATOR}{name}" if namespace else name


def qualify_name(namespace: str, name_text: str) -> str:
    """Resolve a class or module name as written in source against a namespace.

    Whitespace in the written name is dropped and a leading `::` anchors the
    name at the root.

    Example:
        >>> qualify_name("Outer", "Inner :: Leaf")
        'Outer::Inner::Leaf'
        >>> qualify_name("Outer", "::Top")
        'Top'

    """
    name = _WHITESPACE.sub("", name_text)
    if name.startswith(NAMESPACE_SEPARATOR):
        return name.removeprefix(NAMESPACE_SEPARATOR)
    return join_path(namespace, name)


def split_path(path: str) -> tuple[str, str]:
    """Split a namespace path into (parent path, last segment)."""
    parent, _, name = path.rpartition(NAMESPACE_SEPARATOR)
    return parent, name


class AttributeSlots(BaseModel):
    """Reader and writer objects registered for one attribute name."""

    read: str | None = None
    write: str | None = None


class CodeObject(BaseModel):
    """Base documentation object."""

    model_config = ConfigDict(validate_assignment=True)

    name: str
    namespace: str = ROOT_PATH
    docstring: str = ""
    source: str | None = None
    file: str | None = None
    line: int | None = None

    @property
    def path(self) -> str:
        """Return the unique path of the object."""
        return join_path(self.namespace, self.name)


class NamespaceObject(CodeObject):
    """An object that owns other objects (root, module or class)."""

    children: list[str] = Field(default_factory=list)
    attributes: dict[Scope, dict[str, AttributeSlots]] = Field(
        default_factory=lambda: {"instance": {}, "class": {}}
    )


class RootObject(NamespaceObject):
    """The top-level namespace."""

    type: Literal["root"] = "root"
    name: str = ROOT_PATH

    @property
    def path(self) -> str:
        """Return the empty root path."""
        return ROOT_PATH


class ModuleObject(NamespaceObject):
    """A Ruby module."""

    type: Literal["module"] = "module"


class ClassObject(NamespaceObject):
    """A Ruby class."""

    type: Literal["class"] = "class"
    superclass: str | None = None


class ConstantObject(CodeObject):
    """A constant, including enum members."""

    type: Literal["constant"] = "constant"
    value: str = ""


class MethodObject(CodeObject):
    """A method, either written in source or synthesised."""

    type: Literal["method"] = "method"
    scope: Scope = "instance"
    visibility: Visibility = "public"
    # (name, default source) pairs; keyword parameters end with ":"
    parameters: list[tuple[str, str | None]] = Field(default_factory=list)
    # None until a handler decides; True for methods written with `def`
    explicit: bool | None = None

    @property
    def path(self) -> str:
        """Return `Namespace#name` for instance methods, `Namespace.name` otherwise."""
        separator = "#" if self.scope == "instance" else "."
        return f"{self.namespace}{separator}{self.name}"
