"""
Integration tests for the four-stage pipeline.
Verifies grouping, ordering, statistics and cancellation.
"""
import os
import pytest
from dupfinder.core.finder import DuplicateFinderImpl
from dupfinder.core.models import ScanConfig, Stage
from dupfinder.core.scanner import PathCollectorImpl


def collect(root):
    return PathCollectorImpl(str(root)).collect()


class TestDuplicateFinder:
    """Test full pipeline behaviour on real files."""

    def test_finds_expected_groups(self, test_files, temp_dir):
        groups, stats = DuplicateFinderImpl().find_duplicates(collect(temp_dir))

        # photo pair (3003 B), 2 KB pair, 1 KB triple (incl. subdir copy)
        assert [g.size for g in groups] == [3003, 2048, 1024]
        assert groups[2].duplicate_count == 3
        assert not stats.cancelled

    def test_groups_sorted_by_descending_size(self, test_files, temp_dir):
        groups, _ = DuplicateFinderImpl().find_duplicates(collect(temp_dir))
        sizes = [g.size for g in groups]
        assert sizes == sorted(sizes, reverse=True)

    def test_three_identical_files_reported_once(self, tmp_path):
        """Three copies form a single group, not pairwise groups."""
        for name in ("a", "b", "c"):
            (tmp_path / name).write_bytes(b"xyz" * 500)

        groups, _ = DuplicateFinderImpl().find_duplicates(collect(tmp_path))

        assert len(groups) == 1
        assert [f.path for f in groups[0].files] == [str(tmp_path / n) for n in ("a", "b", "c")]

    def test_zero_byte_files_never_grouped(self, tmp_path):
        for i in range(4):
            (tmp_path / f"empty{i}").write_bytes(b"")

        groups, stats = DuplicateFinderImpl().find_duplicates(collect(tmp_path))

        assert groups == []
        assert stats.stage_stats[Stage.SIZE.value]["files_out"] == 0

    def test_same_size_different_content_not_grouped(self, tmp_path):
        (tmp_path / "a").write_bytes(b"A" * 10000)
        (tmp_path / "b").write_bytes(b"A" * 9999 + b"B")

        groups, _ = DuplicateFinderImpl().find_duplicates(collect(tmp_path))

        assert groups == []

    def test_every_group_has_single_size(self, test_files, temp_dir):
        groups, _ = DuplicateFinderImpl().find_duplicates(collect(temp_dir))
        for group in groups:
            assert len({f.size for f in group.files}) == 1

    def test_stage_statistics_recorded(self, test_files, temp_dir):
        _, stats = DuplicateFinderImpl().find_duplicates(collect(temp_dir))

        assert list(stats.stage_stats) == Stage.get_all()
        assert stats.stage_stats[Stage.SIZE.value]["files_in"] == 10
        assert stats.stage_stats[Stage.VERIFY.value]["buckets"] == 3
        assert stats.comparisons == 4
        assert stats.total_time >= 0

    def test_stage_listeners_notified(self, test_files, temp_dir):
        seen = []
        finder = DuplicateFinderImpl(stage_listeners=[lambda name, data: seen.append(name)])
        finder.find_duplicates(collect(temp_dir))
        assert seen == Stage.get_all()

    def test_cancellation_between_stages(self, test_files, temp_dir):
        """A stop request yields no groups and marks the stats as cancelled."""
        calls = {"count": 0}

        def stop_after_first_stage():
            calls["count"] += 1
            return calls["count"] > 1

        groups, stats = DuplicateFinderImpl().find_duplicates(
            collect(temp_dir), stopped_flag=stop_after_first_stage)

        assert groups == []
        assert stats.cancelled
        assert "cancelled" in stats.print_summary()

    @pytest.mark.parametrize("include, expected", [(False, 0), (True, 1)])
    def test_hardlink_setting_from_config(self, tmp_path, include, expected):
        if not hasattr(os, "link"):
            pytest.skip("hard links not supported")
        (tmp_path / "a").write_bytes(b"data" * 10)
        os.link(tmp_path / "a", tmp_path / "b")
        config = ScanConfig(root_dir=str(tmp_path), include_hardlinks=include)

        groups, stats = DuplicateFinderImpl(config).find_duplicates(collect(tmp_path))

        assert len(groups) == expected
        assert stats.hardlinks_skipped == (0 if include else 1)
