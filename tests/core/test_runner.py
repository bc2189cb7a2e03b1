"""Tests for batch runs over a directory tree."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from helpers.files import php, read_file, write_file
from refit.core import runner as runner_module
from refit.core.exceptions import DirectoryNotFoundError
from refit.core.rewrite import InjectionStatus
from refit.core.runner import FileOutcome, PassName, Runner

MESSY = "<?php\necho 1;   \n\n\n\n\n\necho 2;\n\n\n"
CLEAN = "<?php\necho 1;\n\n\necho 2;\n"


def _age(path: Path) -> int:
    """Push ``path``'s mtime into the past and return it (ns)."""
    old = path.stat().st_mtime_ns - 10_000_000_000
    os.utime(path, ns=(old, old))
    return old


def test_format_rewrites_only_changed_files(tmp_path: Path) -> None:
    messy = write_file(tmp_path / "a.php", MESSY)
    clean = write_file(tmp_path / "b.php", CLEAN)
    clean_mtime = _age(clean)

    run = Runner(tmp_path, "php").run_format(2)

    assert read_file(messy) == CLEAN
    assert read_file(clean) == CLEAN
    assert clean.stat().st_mtime_ns == clean_mtime
    assert [f.changed for f in run.files] == [True, False]
    assert [f.written for f in run.files] == [True, False]
    assert run.files_scanned == 2
    assert run.files_changed == 1
    assert run.pass_name is PassName.FORMAT


def test_format_statistics_are_aggregated(tmp_path: Path) -> None:
    write_file(tmp_path / "a.php", MESSY)

    run = Runner(tmp_path, "php").run_format(2)
    outcome = run.files[0]

    assert outcome.stats_before.max_consecutive_blank == 5
    assert outcome.stats_after.max_consecutive_blank == 2
    assert outcome.blank_lines_removed == 5
    assert run.blank_lines_removed == 5
    assert run.excessive_sections_before == 2


def test_dry_run_writes_nothing(tmp_path: Path) -> None:
    messy = write_file(tmp_path / "a.php", MESSY)

    run = Runner(tmp_path, "php", dry_run=True).run_format(2)

    assert read_file(messy) == MESSY
    assert run.files[0].changed
    assert not run.files[0].written
    assert run.files_written == 0


def test_stats_pass_never_writes(tmp_path: Path) -> None:
    messy = write_file(tmp_path / "a.php", MESSY)

    run = Runner(tmp_path, "php").run_stats(2)

    assert read_file(messy) == MESSY
    assert run.files[0].changed
    assert run.files[0].stats_after is None
    assert run.files_written == 0


def test_missing_root_aborts_before_anything(tmp_path: Path) -> None:
    with pytest.raises(DirectoryNotFoundError):
        Runner(tmp_path / "missing", "php").run_format()


def test_read_failure_is_isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    bad = write_file(tmp_path / "a.php", MESSY)
    good = write_file(tmp_path / "b.php", MESSY)
    real_read = runner_module.read_text

    def flaky_read(path):
        if Path(path) == bad:
            raise PermissionError(13, "Permission denied", str(path))
        return real_read(path)

    monkeypatch.setattr(runner_module, "read_text", flaky_read)

    run = Runner(tmp_path, "php").run_format()

    assert [f.failed for f in run.files] == [True, False]
    assert "Permission denied" in run.files[0].error
    assert read_file(good) == CLEAN
    assert run.failures == [run.files[0]]


def test_write_failure_is_isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    write_file(tmp_path / "a.php", MESSY)

    def broken_write(path, content):
        raise OSError("disk full")

    monkeypatch.setattr(runner_module, "write_text", broken_write)

    run = Runner(tmp_path, "php").run_format()

    assert run.files[0].failed
    assert run.files[0].changed
    assert not run.files[0].written


def test_on_file_callback_sees_every_outcome(tmp_path: Path) -> None:
    write_file(tmp_path / "b.php", CLEAN)
    write_file(tmp_path / "a.php", MESSY)
    seen: list[FileOutcome] = []

    Runner(tmp_path, "php", on_file=seen.append).run_format()

    assert [f.path.name for f in seen] == ["a.php", "b.php"]


def test_rewrite_pass(tmp_path: Path, joomla) -> None:
    legacy = write_file(tmp_path / "a.php", php("<?php echo JText::_('A'); ?>\n"))
    modern = write_file(tmp_path / "b.php", php("<?php echo Text::_('A'); ?>\n"))
    orphan = write_file(tmp_path / "c.php", "<?php echo JHtml::_('x'); ?>\n")
    write_file(tmp_path / "d.php", php("<?php $u = JUser::getInstance(); ?>\n"))
    modern_mtime = _age(modern)

    run = Runner(tmp_path, "php").run_rewrite(joomla)
    by_name = {f.path.name: f for f in run.files}

    assert "Text::_('A')" in read_file(legacy)
    assert joomla.imports.is_present(read_file(legacy))
    assert by_name["a.php"].injection is InjectionStatus.INJECTED
    assert by_name["a.php"].written

    assert modern.stat().st_mtime_ns == modern_mtime
    assert not by_name["b.php"].triggered
    assert not by_name["b.php"].changed

    assert read_file(orphan) == "<?php echo HTMLHelper::_('x'); ?>\n"
    assert run.anchor_not_found == [by_name["c.php"]]

    assert run.manual_pending == [by_name["d.php"]]
    assert not by_name["d.php"].changed

    assert run.identifiers_replaced == 2
    assert run.files_changed == 2
    assert run.summary()["anchor_not_found"] == 1


def test_rewrite_twice_changes_nothing(tmp_path: Path, joomla) -> None:
    write_file(tmp_path / "a.php", php("<?php jimport('a.b'); echo JText::_('A'); ?>\n"))

    first = Runner(tmp_path, "php").run_rewrite(joomla)
    second = Runner(tmp_path, "php").run_rewrite(joomla)

    assert first.files_changed == 1
    assert second.files_changed == 0


def test_run_outcome_to_dict(tmp_path: Path) -> None:
    write_file(tmp_path / "a.php", MESSY)

    data = Runner(tmp_path, "php", dry_run=True).run_format().to_dict()

    assert data["pass"] == "format"
    assert data["dry_run"] is True
    assert data["summary"]["files_changed"] == 1
    assert data["files"][0]["stats_before"]["max_consecutive_blank"] == 5
    assert data["files"][0]["written"] is False


def test_given_file_list_skips_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    write_file(tmp_path / "a.php", MESSY)
    write_file(tmp_path / "b.php", MESSY)
    runner = Runner(tmp_path, "php")
    files = runner.discover()
    late = write_file(tmp_path / "c.php", MESSY)
    calls: list[Path] = []
    real_find = runner_module.find_files

    def counting_find(root, extension):
        calls.append(root)
        return real_find(root, extension)

    monkeypatch.setattr(runner_module, "find_files", counting_find)

    run = runner.run_format(files=files)

    assert calls == []
    assert [f.path.name for f in run.files] == ["a.php", "b.php"]
    assert read_file(late) == MESSY
