"""
Integration tests for DuplicateSearchCommand — the orchestration layer between CLI and core.
Verifies correct wiring of collector → pipeline with filtering and progress support.
"""
import pytest
from dupfinder import DuplicateSearchCommand, ScanConfig
from dupfinder.core.models import Stage


class TestDuplicateSearchCommand:
    """Test command orchestration logic (collector + pipeline)."""

    def test_execute_returns_groups_and_stats(self, test_files, temp_dir):
        result = DuplicateSearchCommand().execute(ScanConfig(root_dir=str(temp_dir)))

        assert len(result.groups) == 3
        assert result.candidate_count == 10
        assert Stage.VERIFY.value in result.stats.stage_stats
        assert not result.no_files_matched

    def test_glob_filter_excludes_images(self, test_files, temp_dir):
        """'*.txt' keeps the identical .jpg pair out of the result."""
        config = ScanConfig(root_dir=str(temp_dir), patterns=["*.txt"])
        result = DuplicateSearchCommand().execute(config)

        assert [g.size for g in result.groups] == [2048, 1024]
        assert result.filtered

    def test_regex_filter(self, test_files, temp_dir):
        config = ScanConfig(root_dir=str(temp_dir), regex=r"\.jpg$")
        result = DuplicateSearchCommand().execute(config)

        assert len(result.groups) == 1
        assert result.groups[0].size == 3003

    def test_glob_or_regex(self, test_files, temp_dir):
        config = ScanConfig(root_dir=str(temp_dir), patterns=["dup2_*"], regex=r"^photo_")
        result = DuplicateSearchCommand().execute(config)

        assert [g.size for g in result.groups] == [3003, 2048]

    def test_non_recursive_ignores_subdirectories(self, test_files, temp_dir):
        config = ScanConfig(root_dir=str(temp_dir), recursive=False)
        command = DuplicateSearchCommand()
        result = command.execute(config)

        small = [g for g in result.groups if g.size == 1024][0]
        assert small.duplicate_count == 2
        assert str(test_files["sub_dup"]) not in command.get_paths()

    def test_empty_directory_has_no_groups(self, temp_dir):
        result = DuplicateSearchCommand().execute(ScanConfig(root_dir=str(temp_dir)))

        assert result.groups == []
        assert result.no_files_matched
        assert not result.filtered

    def test_no_files_matched_filter(self, test_files, temp_dir):
        config = ScanConfig(root_dir=str(temp_dir), patterns=["*.pdf"])
        result = DuplicateSearchCommand().execute(config)

        assert result.no_files_matched
        assert result.filtered
        assert result.groups == []

    def test_missing_root_raises(self, temp_dir):
        config = ScanConfig(root_dir=str(temp_dir / "missing"))
        with pytest.raises(RuntimeError, match="Directory does not exist"):
            DuplicateSearchCommand().execute(config)

    def test_get_paths_returns_copy(self, test_files, temp_dir):
        command = DuplicateSearchCommand()
        command.execute(ScanConfig(root_dir=str(temp_dir)))

        paths = command.get_paths()
        paths.clear()
        assert len(command.get_paths()) == 10

    def test_execute_invokes_progress_callback(self, test_files, temp_dir):
        stages = set()
        DuplicateSearchCommand().execute(
            ScanConfig(root_dir=str(temp_dir)),
            progress_callback=lambda stage, current, total: stages.add(stage)
        )
        assert "Collecting" in stages
        assert Stage.VERIFY.value in stages

    def test_execute_invokes_stage_listener(self, test_files, temp_dir):
        seen = []
        DuplicateSearchCommand().execute(
            ScanConfig(root_dir=str(temp_dir)),
            stage_listener=lambda stage, data: seen.append(stage)
        )
        assert len(seen) == 4

    def test_brace_glob_selects_images(self, test_files, temp_dir):
        config = ScanConfig(root_dir=str(temp_dir), patterns=["*.{jpg,png}"])
        result = DuplicateSearchCommand().execute(config)

        assert [g.size for g in result.groups] == [3003]
        assert not result.no_files_matched

    def test_cancelled_filtered_scan_is_not_no_match(self, test_files, temp_dir):
        """A scan stopped during collection is reported as cancelled, not as an empty filter result."""
        config = ScanConfig(root_dir=str(temp_dir), patterns=["*.txt"])
        result = DuplicateSearchCommand().execute(config, stopped_flag=lambda: True)

        assert result.candidate_count == 0
        assert result.cancelled
        assert not result.no_files_matched

    def test_one_shot_stop_during_walk(self, test_files, temp_dir):
        """A flag that fires once, during the walk, still marks the result as cancelled."""
        calls = {"count": 0}

        def stop_once():
            calls["count"] += 1
            return calls["count"] == 2

        config = ScanConfig(root_dir=str(temp_dir), patterns=["*.txt"])
        result = DuplicateSearchCommand().execute(config, stopped_flag=stop_once)

        assert result.cancelled
        assert not result.no_files_matched
