"""In-memory documentation store.

Holds every documentation object produced during one run, keyed by path.
Single threaded; handlers mutate objects in place.
"""

from __future__ import annotations

import logging

from sorbet_docs.code_objects import (
    ROOT_PATH,
    CodeObject,
    MethodObject,
    ModuleObject,
    NamespaceObject,
    RootObject,
    Scope,
    split_path,
)
from sorbet_docs.errors import ObjectNotFoundError

logger = logging.getLogger(__name__)


class DocumentationStore:
    """Registry of documentation objects keyed by path.

    Registration uses upsert semantics: registering an object whose path is
    already taken replaces the earlier object but keeps its place among the
    namespace's children.
    """

    def __init__(self) -> None:
        """Initialise the store with an empty root namespace."""
        self.root = RootObject()
        self._objects: dict[str, CodeObject] = {ROOT_PATH: self.root}

    def register(self, obj: CodeObject) -> CodeObject:
        """Store an object and attach it to its namespace.

        Args:
            obj: Object to store

        Returns:
            The stored object

        Raises:
            ObjectNotFoundError: If the object's namespace is not registered

        """
        namespace = self.namespace(obj.namespace)
        path = obj.path
        previous = self._objects.get(path)
        if previous is not None and previous is not obj:
            logger.debug("Replacing documentation object %s", path)

        self._objects[path] = obj
        if path not in namespace.children:
            namespace.children.append(path)
        return obj

    def at(self, path: str) -> CodeObject | None:
        """Return the object at a path, or None if there is none."""
        return self._objects.get(path)

    def get(self, path: str) -> CodeObject:
        """Return the object at a path.

        Raises:
            ObjectNotFoundError: If nothing is registered at the path

        """
        obj = self._objects.get(path)
        if obj is None:
            raise ObjectNotFoundError(f"Object '{path}' not found")
        return obj

    def namespace(self, path: str) -> NamespaceObject:
        """Return the namespace object at a path.

        Raises:
            ObjectNotFoundError: If no namespace is registered at the path

        """
        obj = self.get(path)
        if not isinstance(obj, NamespaceObject):
            raise ObjectNotFoundError(f"Object '{path}' is not a namespace")
        return obj

    def ensure_namespace(self, path: str) -> NamespaceObject:
        """Return the namespace at a path, creating placeholder modules as needed.

        Used for names like `class Outer::Inner` where `Outer` is defined in
        a file that has not been processed.
        """
        existing = self._objects.get(path)
        if isinstance(existing, NamespaceObject):
            return existing

        parent_path, name = split_path(path)
        self.ensure_namespace(parent_path)
        logger.debug("Creating placeholder module %s", path)
        placeholder = ModuleObject(name=name, namespace=parent_path)
        self.register(placeholder)
        return placeholder

    def find_or_create_method(
        self, namespace: str, name: str, scope: Scope = "instance"
    ) -> MethodObject:
        """Return a registered method, or a new unregistered one with that identity."""
        candidate = MethodObject(name=name, namespace=namespace, scope=scope)
        existing = self._objects.get(candidate.path)
        if isinstance(existing, MethodObject):
            return existing
        return candidate

    def children_of(self, path: str) -> list[CodeObject]:
        """Return the objects registered under a namespace, in registration order."""
        namespace = self.namespace(path)
        return [self._objects[child] for child in namespace.children]

    def objects(self) -> list[CodeObject]:
        """Return all objects except the root, in registration order."""
        return [obj for path, obj in self._objects.items() if path != ROOT_PATH]

    def paths(self) -> list[str]:
        """Return all registered paths except the root."""
        return [path for path in self._objects if path != ROOT_PATH]

    def __contains__(self, path: object) -> bool:
        """Check if a path is registered."""
        return path in self._objects

    def __len__(self) -> int:
        """Return the number of registered objects, excluding the root."""
        return len(self._objects) - 1
