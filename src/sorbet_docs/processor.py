"""Documentation processor: runs the statement handlers over Ruby files."""

import logging
from collections.abc import Iterable
from pathlib import Path

from sorbet_docs.config import SorbetDocsConfig
from sorbet_docs.errors import SorbetDocsError, SourceReadError
from sorbet_docs.handlers import HandlerContext, HandlerRegistry, default_registry
from sorbet_docs.parser import ParsedSource, RubySourceParser
from sorbet_docs.state import FieldAccumulator
from sorbet_docs.store import DocumentationStore

logger = logging.getLogger(__name__)

_DEFAULT_ENCODING = "utf-8"


class DocumentationProcessor:
    """Builds a documentation store from Ruby source files.

    One processor is one run: the store and the field accumulator are shared
    by every file it processes, so a class reopened in a later file adds to
    the documentation gathered from earlier files.
    """

    def __init__(
        self,
        config: SorbetDocsConfig | None = None,
        store: DocumentationStore | None = None,
        registry: HandlerRegistry | None = None,
    ) -> None:
        """Initialise the processor.

        Args:
            config: Run configuration (defaults if None)
            store: Store to populate (a new one if None)
            registry: Statement handlers (the built-in handlers if None)

        """
        self.config = config or SorbetDocsConfig()
        self.store = store or DocumentationStore()
        self.registry = registry or default_registry()
        self.fields = FieldAccumulator()
        self._parser = RubySourceParser()
        self._processed_files: list[str] = []
        self._failed_files: list[str] = []

    @property
    def processed_files(self) -> list[str]:
        """Files documented so far, in processing order."""
        return list(self._processed_files)

    @property
    def failed_files(self) -> list[str]:
        """Files that could not be read or parsed."""
        return list(self._failed_files)

    def process_source(self, source_code: str, file_path: str = "(string)") -> ParsedSource:
        """Document one piece of Ruby source.

        Args:
            source_code: Ruby source code
            file_path: Path recorded on the registered objects

        Returns:
            The parsed source

        Raises:
            ParserError: If the source cannot be parsed

        """
        parsed = self._parser.parse(source_code, file_path)
        context = HandlerContext(
            parsed=parsed,
            store=self.store,
            fields=self.fields,
            config=self.config,
            registry=self.registry,
            namespace=self.store.root,
            owner=self.store.root,
        )
        context.process_body(parsed.root_node)
        self._processed_files.append(file_path)
        return parsed

    def process_file(self, path: Path) -> ParsedSource | None:
        """Document one Ruby file.

        Returns:
            The parsed source, or None if the file exceeds the size limit

        Raises:
            SourceReadError: If the file cannot be read or decoded
            ParserError: If the source cannot be parsed

        """
        try:
            size = path.stat().st_size
            if size > self.config.max_file_size:
                logger.warning("Skipping large file: %s (%d bytes)", path, size)
                return None
            source_code = path.read_text(encoding=_DEFAULT_ENCODING)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Failed to read {path}: {e}") from e

        return self.process_source(source_code, str(path))

    def process_paths(self, paths: Iterable[Path]) -> DocumentationStore:
        """Document files and directories, continuing past files that fail.

        Directories are walked recursively for files with a configured
        extension, in sorted order.

        Returns:
            The populated store

        """
        for path in paths:
            for file_path in self._collect_files(path):
                try:
                    self.process_file(file_path)
                except SorbetDocsError as e:
                    logger.error("Failed to document %s: %s", file_path, e)
                    self._failed_files.append(str(file_path))

        logger.info(
            "Documented %d file(s), %d object(s), %d failure(s)",
            len(self._processed_files),
            len(self.store),
            len(self._failed_files),
        )
        return self.store

    def finish(self) -> list[str]:
        """Report namespaces whose fields never reached a constructor.

        Returns:
            Paths of namespaces with unsynthesised fields

        """
        unsynthesised = self.fields.unsynthesised()
        for namespace in unsynthesised:
            logger.warning(
                "Fields declared in %s were not folded into a constructor",
                namespace or "(top level)",
            )
        return unsynthesised

    def _collect_files(self, path: Path) -> list[Path]:
        if path.is_dir():
            return sorted(
                candidate
                for candidate in path.rglob("*")
                if candidate.is_file()
                and RubySourceParser.is_supported_file(candidate, self.config.file_extensions)
            )
        if not path.exists():
            logger.error("Path does not exist: %s", path)
            self._failed_files.append(str(path))
            return []
        return [path]
