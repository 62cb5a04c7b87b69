"""
Unit tests for ByteComparatorImpl: lock-step chunk comparison and hard link detection.
"""
import os
import pytest
from dupfinder.core.comparator import ByteComparatorImpl


class TestContentsEqual:

    def test_identical_files_equal(self, tmp_path):
        data = os.urandom(20000)
        (tmp_path / "a").write_bytes(data)
        (tmp_path / "b").write_bytes(data)
        assert ByteComparatorImpl().contents_equal(str(tmp_path / "a"), str(tmp_path / "b"))

    def test_difference_in_last_chunk_detected(self, tmp_path):
        data = b"X" * 20000
        (tmp_path / "a").write_bytes(data)
        (tmp_path / "b").write_bytes(data[:-1] + b"Y")
        assert not ByteComparatorImpl().contents_equal(str(tmp_path / "a"), str(tmp_path / "b"))

    def test_different_lengths_not_equal(self, tmp_path):
        """A file that is a prefix of the other is not equal: EOF must coincide."""
        (tmp_path / "a").write_bytes(b"X" * 100)
        (tmp_path / "b").write_bytes(b"X" * 101)
        assert not ByteComparatorImpl(chunk_size=10).contents_equal(str(tmp_path / "a"), str(tmp_path / "b"))

    def test_small_chunk_size(self, tmp_path):
        (tmp_path / "a").write_bytes(b"abcdefg")
        (tmp_path / "b").write_bytes(b"abcdefg")
        assert ByteComparatorImpl(chunk_size=2).contents_equal(str(tmp_path / "a"), str(tmp_path / "b"))

    def test_missing_file_raises(self, tmp_path):
        (tmp_path / "a").write_bytes(b"abc")
        with pytest.raises(OSError):
            ByteComparatorImpl().contents_equal(str(tmp_path / "a"), str(tmp_path / "gone"))


class TestIsSameFile:

    @pytest.mark.skipif(not hasattr(os, "link"), reason="hard links not supported")
    def test_hard_links_are_same_file(self, tmp_path):
        (tmp_path / "a").write_bytes(b"abc")
        os.link(tmp_path / "a", tmp_path / "b")
        assert ByteComparatorImpl.is_same_file(str(tmp_path / "a"), str(tmp_path / "b"))

    def test_copies_are_not_same_file(self, tmp_path):
        (tmp_path / "a").write_bytes(b"abc")
        (tmp_path / "b").write_bytes(b"abc")
        assert not ByteComparatorImpl.is_same_file(str(tmp_path / "a"), str(tmp_path / "b"))

    def test_missing_file_is_not_same(self, tmp_path):
        (tmp_path / "a").write_bytes(b"abc")
        assert not ByteComparatorImpl.is_same_file(str(tmp_path / "a"), str(tmp_path / "gone"))
