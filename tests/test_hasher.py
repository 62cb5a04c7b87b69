"""
Unit tests for HasherImpl with XXHash128AlgorithmImpl.
Verifies 16-byte partial/full fingerprints and bounded reads.
"""
import io
import pytest
from dupfinder.core.hasher import HasherImpl, XXHash128AlgorithmImpl, FingerprintConfig
from dupfinder.core.models import SizedFile


class TestXXHash128AlgorithmImpl:

    def test_digest_is_128_bits(self):
        digest = XXHash128AlgorithmImpl().hash_stream(io.BytesIO(b"data"))
        assert isinstance(digest, bytes)
        assert len(digest) == 16

    def test_chunked_stream_equals_single_read(self):
        """Chunk size must not change the digest."""
        data = bytes(range(256)) * 100
        small = XXHash128AlgorithmImpl(chunk_size=7).hash_stream(io.BytesIO(data))
        large = XXHash128AlgorithmImpl(chunk_size=1 << 20).hash_stream(io.BytesIO(data))
        assert small == large

    def test_limit_reads_only_prefix(self):
        algorithm = XXHash128AlgorithmImpl(chunk_size=3)
        limited = algorithm.hash_stream(io.BytesIO(b"HEAD" + b"tail"), limit=4)
        prefix_only = algorithm.hash_stream(io.BytesIO(b"HEAD"))
        assert limited == prefix_only

    def test_order_sensitive(self):
        algorithm = XXHash128AlgorithmImpl()
        assert algorithm.hash_stream(io.BytesIO(b"ab")) != algorithm.hash_stream(io.BytesIO(b"ba"))


class TestHasherImpl:
    """Test partial and full file fingerprints."""

    def test_same_content_same_full_hash(self, tmp_path):
        content = b"test content " * 1000
        (tmp_path / "a").write_bytes(content)
        (tmp_path / "b").write_bytes(content)
        hasher = HasherImpl()

        file_a = SizedFile(str(tmp_path / "a"), len(content))
        file_b = SizedFile(str(tmp_path / "b"), len(content))
        full_a = hasher.compute_full_hash(file_a.with_partial_hash(hasher.compute_partial_hash(file_a)))
        full_b = hasher.compute_full_hash(file_b.with_partial_hash(hasher.compute_partial_hash(file_b)))

        assert full_a == full_b
        assert len(full_a) == 16

    def test_partial_hash_ignores_bytes_after_prefix(self, tmp_path):
        """Files differing only after the first 8KB share a partial hash but not a full hash."""
        prefix = b"P" * FingerprintConfig.PARTIAL_HASH_SIZE
        (tmp_path / "a").write_bytes(prefix + b"tail-one")
        (tmp_path / "b").write_bytes(prefix + b"tail-two")
        hasher = HasherImpl()
        file_a = SizedFile(str(tmp_path / "a"), len(prefix) + 8)
        file_b = SizedFile(str(tmp_path / "b"), len(prefix) + 8)

        partial_a = hasher.compute_partial_hash(file_a)
        partial_b = hasher.compute_partial_hash(file_b)
        assert partial_a == partial_b

        full_a = hasher.compute_full_hash(file_a.with_partial_hash(partial_a))
        full_b = hasher.compute_full_hash(file_b.with_partial_hash(partial_b))
        assert full_a != full_b

    def test_partial_hash_of_short_file_covers_whole_file(self, tmp_path):
        """Files shorter than the prefix are hashed completely."""
        (tmp_path / "a").write_bytes(b"short-a")
        (tmp_path / "b").write_bytes(b"short-b")
        hasher = HasherImpl()
        assert hasher.compute_partial_hash(SizedFile(str(tmp_path / "a"), 7)) != \
            hasher.compute_partial_hash(SizedFile(str(tmp_path / "b"), 7))

    def test_missing_file_raises_os_error(self, tmp_path):
        """Read errors propagate so the caller can exclude the file."""
        hasher = HasherImpl()
        with pytest.raises(OSError):
            hasher.compute_partial_hash(SizedFile(str(tmp_path / "deleted.txt"), 7))
