"""
Tests for cache folder clearing and the startup task state machine.
"""

import os

import pytest

import simkit_cache
from simkit_cache import (
    ClearStatus,
    build_task_definition,
    clear_folder,
    clear_folders,
    disable_startup_clearing,
    enable_startup_clearing,
    query_startup_task,
)
from simkit_errors import OperationFailure, SimkitError
from simkit_tasks import SYSTEM_ACCOUNT, TaskDefinition, TaskInfo

from conftest import make_config


def populate(folder):
    folder.mkdir(parents=True, exist_ok=True)
    (folder / "a.bin").write_bytes(b"\x00" * 16)
    (folder / "b.txt").write_text("cache")
    nested = folder / "shaders" / "v2"
    nested.mkdir(parents=True)
    (nested / "c.cache").write_text("x")


class TestClearFolder:

    def test_missing_folder_is_benign(self, tmp_path):
        result = clear_folder(str(tmp_path / "nope"))
        assert result.status is ClearStatus.NOT_FOUND
        assert result.errors == []

    def test_empty_folder(self, tmp_path):
        (tmp_path / "Temp").mkdir()
        assert clear_folder(str(tmp_path / "Temp")).status is ClearStatus.ALREADY_EMPTY

    def test_mixed_contents_removed_folder_kept(self, tmp_path):
        folder = tmp_path / "Cache"
        populate(folder)

        result = clear_folder(str(folder))

        assert result.status is ClearStatus.CLEARED
        assert result.removed == 3
        assert folder.is_dir()
        assert list(folder.iterdir()) == []

    def test_entry_failure_does_not_stop_others(self, tmp_path, monkeypatch):
        folder = tmp_path / "Cache"
        populate(folder)
        real_remove = simkit_cache._remove_entry

        def flaky(path):
            if path.endswith("a.bin"):
                raise PermissionError("locked by simulator")
            real_remove(path)

        monkeypatch.setattr(simkit_cache, "_remove_entry", flaky)

        result = clear_folder(str(folder))

        assert result.status is ClearStatus.FAILED
        assert result.removed == 2
        assert [p.name for p in folder.iterdir()] == ["a.bin"]
        assert "locked by simulator" in result.errors[0]


def test_clear_folders_reports_each_folder(tmp_path, capsys, monkeypatch):
    cache, temp, broken = tmp_path / "Cache", tmp_path / "Temp", tmp_path / "Broken"
    populate(cache)
    temp.mkdir()
    populate(broken)

    real_remove = simkit_cache._remove_entry

    def flaky(path):
        if "Broken" in path:
            raise OSError("access denied")
        real_remove(path)

    monkeypatch.setattr(simkit_cache, "_remove_entry", flaky)

    results = clear_folders([str(broken), str(cache), str(temp), str(tmp_path / "Video")])
    out = capsys.readouterr().out

    assert [r.status for r in results] == [
        ClearStatus.FAILED,
        ClearStatus.CLEARED,
        ClearStatus.ALREADY_EMPTY,
        ClearStatus.NOT_FOUND,
    ]
    assert list(cache.iterdir()) == []
    assert f"Already empty: {temp}" in out
    assert "Not found, skipped" in out
    assert "access denied" in out


class TestStartupTask:

    def test_initially_unregistered(self, scheduler, config):
        state = query_startup_task(scheduler, config)
        assert not state.registered
        assert state.label == "Disabled"

    def test_definition_targets_own_entry_point(self, config):
        definition = build_task_definition(config)

        assert definition.execute == config.python_exe
        assert os.path.abspath(config.entry_script) in definition.arguments
        assert definition.arguments.endswith("--mode startup")
        assert definition.trigger == "AtStartup"
        assert definition.user_id == SYSTEM_ACCOUNT
        assert definition.run_level == "Highest"
        assert definition.start_when_available is True
        assert definition.execution_time_limit_minutes == 30

    def test_definition_requires_resolvable_entry_script(self, tmp_path):
        config = make_config(tmp_path, entry_script=str(tmp_path / "gone.py"))

        with pytest.raises(SimkitError):
            build_task_definition(config)

    def test_enable_without_entry_script_leaves_state_untouched(self, tmp_path, scheduler):
        config = make_config(tmp_path, entry_script="")

        with pytest.raises(SimkitError):
            enable_startup_clearing(scheduler, config)

        assert scheduler.calls == []

    def test_enable_then_disable_round_trip(self, scheduler, config):
        enabled = enable_startup_clearing(scheduler, config)

        assert enabled.registered
        assert enabled.state == "Ready"
        assert enabled.label == "Enabled (Ready)"

        assert disable_startup_clearing(scheduler, config) is True
        assert not query_startup_task(scheduler, config).registered

    def test_disable_when_absent_is_noop(self, scheduler, config):
        assert disable_startup_clearing(scheduler, config) is False
        assert ("unregister", config.task_name) not in scheduler.calls

    def test_enable_replaces_existing_task(self, scheduler, config):
        stale = TaskDefinition(
            execute=r"C:\old\python.exe",
            arguments="old.py --mode startup",
            working_directory=r"C:\old",
            user_id="Operator",
            run_level="Limited",
            start_when_available=False,
            execution_time_limit_minutes=240,
        )
        scheduler.register(config.task_name, stale)

        enable_startup_clearing(scheduler, config)

        assert scheduler.definition(config.task_name) == build_task_definition(config)
        assert len(scheduler.tasks) == 1
        names = [call for call, _ in scheduler.calls]
        assert names[-3:] == ["unregister", "register", "query"]

    def test_failed_removal_aborts_enable(self, scheduler, config):
        scheduler.tasks[config.task_name] = (TaskInfo(config.task_name, "Running"), None)

        def refuse(name):
            raise OperationFailure("access is denied")

        scheduler.unregister = refuse

        with pytest.raises(OperationFailure, match="Could not replace"):
            enable_startup_clearing(scheduler, config)

        assert ("register", config.task_name) not in scheduler.calls


def test_read_only_entries_are_retried_writable(tmp_path):
    locked = tmp_path / "frame.bin"
    locked.write_text("x")
    locked.chmod(0o444)

    simkit_cache._clear_readonly(os.remove, str(locked), None)

    assert not locked.exists()


def test_subfolders_are_removed_with_read_only_handler(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(simkit_cache.shutil, "rmtree", lambda path, **kw: calls.append((path, kw)))
    (tmp_path / "replays").mkdir()

    simkit_cache._remove_entry(str(tmp_path / "replays"))

    assert len(calls) == 1
    path, kwargs = calls[0]
    assert path == str(tmp_path / "replays")
    assert list(kwargs.values()) == [simkit_cache._clear_readonly]
