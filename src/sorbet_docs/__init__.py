"""Documentation extraction for Ruby code annotated with Sorbet."""

from sorbet_docs.code_objects import (
    ClassObject,
    CodeObject,
    ConstantObject,
    MethodObject,
    ModuleObject,
    NamespaceObject,
    RootObject,
)
from sorbet_docs.config import SorbetDocsConfig
from sorbet_docs.errors import (
    ConfigError,
    NodeNotFoundError,
    ObjectNotFoundError,
    ParserError,
    SorbetDocsError,
    SourceReadError,
)
from sorbet_docs.parser import ParsedSource, RubySourceParser
from sorbet_docs.processor import DocumentationProcessor
from sorbet_docs.state import FieldAccumulator, FieldRecord
from sorbet_docs.store import DocumentationStore

__all__ = [
    "ClassObject",
    "CodeObject",
    "ConfigError",
    "ConstantObject",
    "DocumentationProcessor",
    "DocumentationStore",
    "FieldAccumulator",
    "FieldRecord",
    "MethodObject",
    "ModuleObject",
    "NamespaceObject",
    "NodeNotFoundError",
    "ObjectNotFoundError",
    "ParsedSource",
    "ParserError",
    "RootObject",
    "RubySourceParser",
    "SorbetDocsConfig",
    "SorbetDocsError",
    "SourceReadError",
]
