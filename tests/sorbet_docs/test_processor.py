"""Tests for DocumentationProcessor."""

from pathlib import Path

import pytest

from sorbet_docs.config import SorbetDocsConfig
from sorbet_docs.errors import SourceReadError
from sorbet_docs.processor import DocumentationProcessor


class TestProcessFile:
    """Test documenting single files."""

    def test_process_file_records_path(self, processor, data_dir: Path) -> None:
        """Test that objects carry the file they were read from."""
        processor.process_file(data_dir / "enums.rb")

        assert processor.store.get("Suit").file == str(data_dir / "enums.rb")
        assert processor.processed_files == [str(data_dir / "enums.rb")]

    def test_large_file_is_skipped(self, tmp_path: Path, caplog) -> None:
        """Test that files above the size limit are skipped with a warning."""
        source = tmp_path / "big.rb"
        source.write_text("class Big\nend\n" * 10)
        processor = DocumentationProcessor(SorbetDocsConfig(max_file_size=16))

        assert processor.process_file(source) is None
        assert "Big" not in processor.store
        assert "Skipping large file" in caplog.text

    def test_undecodable_file_raises(self, processor, tmp_path: Path) -> None:
        """Test that non-UTF-8 files raise SourceReadError."""
        source = tmp_path / "latin1.rb"
        source.write_bytes(b"# caf\xe9\nclass Cafe\nend\n")

        with pytest.raises(SourceReadError, match="Failed to read"):
            processor.process_file(source)

    def test_missing_file_raises(self, processor, tmp_path: Path) -> None:
        """Test that unreadable files raise SourceReadError."""
        with pytest.raises(SourceReadError):
            processor.process_file(tmp_path / "missing.rb")


class TestProcessPaths:
    """Test documenting files and directories."""

    def test_directory_walk_by_extension(self, tmp_path: Path) -> None:
        """Test that directories are walked recursively for configured extensions."""
        (tmp_path / "lib" / "nested").mkdir(parents=True)
        (tmp_path / "lib" / "a.rb").write_text("class A\nend\n")
        (tmp_path / "lib" / "nested" / "b.rbi").write_text("class B\nend\n")
        (tmp_path / "lib" / "notes.txt").write_text("class C\nend\n")
        processor = DocumentationProcessor()

        store = processor.process_paths([tmp_path / "lib"])

        assert set(store.paths()) == {"A", "B"}
        assert len(processor.processed_files) == 2

    def test_failures_do_not_stop_the_run(self, tmp_path: Path, caplog) -> None:
        """Test that a failing file is logged and later files are still documented."""
        (tmp_path / "bad.rb").write_bytes(b"\xff\xfe")
        (tmp_path / "good.rb").write_text("class Good\nend\n")
        processor = DocumentationProcessor()

        store = processor.process_paths([tmp_path / "bad.rb", tmp_path / "good.rb", tmp_path / "nope.rb"])

        assert "Good" in store
        assert processor.failed_files == [str(tmp_path / "bad.rb"), str(tmp_path / "nope.rb")]
        assert "Failed to document" in caplog.text
        assert "Path does not exist" in caplog.text

    def test_summary_is_logged(self, tmp_path: Path, caplog) -> None:
        """Test the info-level run summary."""
        caplog.set_level("INFO", logger="sorbet_docs")
        (tmp_path / "a.rb").write_text("class A\nend\n")

        DocumentationProcessor().process_paths([tmp_path])

        assert "Documented 1 file(s), 1 object(s), 0 failure(s)" in caplog.text


class TestFinish:
    """Test the end-of-run lint."""

    def test_top_level_fields_are_reported(self, processor, caplog) -> None:
        """Test that fields outside any class are reported as unsynthesised."""
        processor.process_source("const :orphan, String\n")

        assert processor.finish() == [""]
        assert "(top level)" in caplog.text

    def test_fields_in_module_are_reported(self, processor) -> None:
        """Test that fields declared in a module never reach a constructor."""
        processor.process_source("module Mixin\n  prop :x, String\nend\n")

        assert processor.finish() == ["Mixin"]
