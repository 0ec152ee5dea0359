"""Constructor synthesis for classes declaring struct fields.

Runs as a class-close hook: once a class body has been processed, every
`const`/`prop` field recorded for the class becomes a keyword parameter of
`initialize`. A hand-written `initialize` keeps its prose, its source and
its directives; its `@param` tags for the fields get the field types (and
the field comment, when there is one) and its `@return` is replaced.
"""

import logging

from tree_sitter import Node

from sorbet_docs.code_objects import ClassObject
from sorbet_docs.directives import add_directives, extract_directives
from sorbet_docs.docstrings import Tag
from sorbet_docs.handlers.base import HandlerContext
from sorbet_docs.handlers.namespaces import class_path
from sorbet_docs.state import FieldRecord
from sorbet_docs.types import NIL_TYPE

logger = logging.getLogger(__name__)

CONSTRUCTOR_NAME = "initialize"


def constructor_parameters(fields: list[FieldRecord]) -> list[tuple[str, str | None]]:
    """Return keyword parameters for the fields, in declaration order.

    A field without an explicit default defaults to `nil` when it is nilable
    and is required otherwise.
    """
    return [
        (f"{field.name}:", field.default or (NIL_TYPE if field.is_nilable else None))
        for field in fields
    ]


class ConstructorSynthesizer:
    """Folds the fields of a class into the documentation of its constructor."""

    def __call__(self, node: Node, class_object: ClassObject, context: HandlerContext) -> None:
        """Synthesise `initialize` for a class that has just been processed.

        Args:
            node: The class declaration
            class_object: The class documentation object
            context: Context of the namespace enclosing the class

        """
        path = class_path(node, context)
        fields = context.fields.fields_for(path)
        if not fields:
            return

        method = context.store.find_or_create_method(path, CONSTRUCTOR_NAME, "instance")
        docstring, directives = extract_directives(method.docstring)

        names = {field.name for field in fields}
        written = {tag.name: tag.text for tag in docstring.tags_named("param") if tag.name in names}
        docstring.remove_tags("param", names)
        for field in fields:
            # An undocumented field keeps the text of a hand-written tag
            text = field.doc or written.get(field.name, "")
            docstring.add_tag(
                Tag(tag_name="param", text=text, types=list(field.types), name=field.name)
            )
        docstring.remove_tags("return")
        docstring.add_tag(Tag(tag_name="return", types=[path]))

        method.parameters = constructor_parameters(fields)
        if method.source is None:
            method.source = "\n".join(field.source for field in fields)
        if method.explicit is None:
            method.explicit = False
        if method.file is None:
            method.file = context.parsed.file_path
            method.line = context.parsed.line_of(node)

        context.store.register(method)
        method.docstring = add_directives(docstring.to_raw(), directives)
        context.fields.mark_synthesised(path)

        logger.debug(
            "Synthesised %s with %d field parameter(s) for %s",
            method.path,
            len(fields),
            class_object.path,
        )
