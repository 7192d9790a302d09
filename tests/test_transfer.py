"""Tests for transfer.py -- guarded copy and rename-only move."""

import errno
import os
import shutil
from unittest.mock import patch

import pytest

from stablefs.config import CopyConfig
from stablefs.errors import DurabilityError, NotStableError
from stablefs.transfer import copy_file, move_file


@pytest.fixture
def no_sleep():
    with patch("stablefs.stability.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def fast_config(monkeypatch):
    for var in ("FILEUTILS_STABLE_ATTEMPTS", "FILEUTILS_STABLE_SETTLE_MS"):
        monkeypatch.delenv(var, raising=False)
    return CopyConfig(_env_file=None, stable_attempts=3, stable_settle_ms=100)


class TestCopyFile:
    def test_copies_bytes(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "in.bin"
        data = bytes(range(256)) * 64
        src.write_bytes(data)
        dst = tmp_path / "out.bin"
        result = copy_file(src, dst, config=fast_config)
        assert result == dst
        assert dst.read_bytes() == data
        assert dst.stat().st_size == src.stat().st_size

    def test_overwrites_existing_dst(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "in.txt"
        src.write_text("new")
        dst = tmp_path / "out.txt"
        dst.write_text("much longer old content")
        copy_file(src, dst, config=fast_config)
        assert dst.read_text() == "new"

    def test_accepts_str_paths(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "in.txt"
        src.write_text("abc")
        copy_file(str(src), str(tmp_path / "out.txt"), config=fast_config)
        assert (tmp_path / "out.txt").read_text() == "abc"

    def test_empty_source(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "empty"
        src.touch()
        dst = tmp_path / "copy"
        copy_file(src, dst, config=fast_config)
        assert dst.read_bytes() == b""

    def test_fsyncs_destination(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "in.txt"
        src.write_text("abc")
        with patch("stablefs.transfer.os.fsync") as mock_fsync:
            copy_file(src, tmp_path / "out.txt", config=fast_config)
        mock_fsync.assert_called_once()


class TestCopyNotStable:
    def test_growing_source_raises(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "growing.bin"
        src.write_bytes(b"x")

        def _grow(_seconds):
            with open(src, "ab") as fh:
                fh.write(b"x")

        no_sleep.side_effect = _grow
        dst = tmp_path / "out.bin"
        dst.write_bytes(b"previous content")

        with pytest.raises(NotStableError) as exc_info:
            copy_file(src, dst, config=fast_config)

        assert exc_info.value.path == str(src)
        assert dst.read_bytes() == b"previous content"

    def test_missing_source_not_stable(self, tmp_path, no_sleep, fast_config):
        dst = tmp_path / "out.bin"
        with pytest.raises(NotStableError, match="source not stable"):
            copy_file(tmp_path / "missing.bin", dst, config=fast_config)
        assert not dst.exists()

    def test_directory_source_not_stable(self, tmp_path, no_sleep, fast_config):
        with pytest.raises(NotStableError):
            copy_file(tmp_path, tmp_path / "out", config=fast_config)


class TestCopyIOErrors:
    def test_unwritable_destination(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "in.txt"
        src.write_text("abc")
        with pytest.raises(FileNotFoundError):
            copy_file(src, tmp_path / "no" / "such" / "dir.txt", config=fast_config)

    def test_same_file_rejected(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "data.bin"
        src.write_bytes(b"data")
        with pytest.raises(shutil.SameFileError):
            copy_file(src, tmp_path / "." / "data.bin", config=fast_config)
        assert src.read_bytes() == b"data"

    def test_hardlink_rejected(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "data.bin"
        src.write_bytes(b"data")
        link = tmp_path / "link.bin"
        os.link(src, link)
        with pytest.raises(shutil.SameFileError):
            copy_file(src, link, config=fast_config)
        assert src.read_bytes() == b"data"

    def test_source_vanishes_after_probe(self, tmp_path, fast_config):
        src = tmp_path / "in.txt"
        src.write_text("abc")
        dst = tmp_path / "out.txt"
        with patch("stablefs.transfer.is_stable", return_value=True):
            src.unlink()
            with pytest.raises(FileNotFoundError):
                copy_file(src, dst, config=fast_config)
        # source is opened before the destination is created
        assert not dst.exists()

    def test_fsync_failure_raises_durability_error(self, tmp_path, no_sleep, fast_config):
        src = tmp_path / "in.txt"
        src.write_text("all of it")
        dst = tmp_path / "out.txt"
        with patch("stablefs.transfer.os.fsync", side_effect=OSError(errno.EIO, "I/O error")):
            with pytest.raises(DurabilityError) as exc_info:
                copy_file(src, dst, config=fast_config)
        assert exc_info.value.path == str(dst)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert dst.read_text() == "all of it"


class TestCopyConfigResolution:
    def test_reads_env_when_no_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FILEUTILS_STABLE_ATTEMPTS", "8")
        monkeypatch.setenv("FILEUTILS_STABLE_SETTLE_MS", "200")
        src = tmp_path / "in.txt"
        src.write_text("abc")
        with patch("stablefs.transfer.is_stable", return_value=True) as mock_stable:
            copy_file(src, tmp_path / "out.txt")
        mock_stable.assert_called_once_with(src, 8, pytest.approx(0.2))

    def test_env_above_ceiling_uses_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FILEUTILS_STABLE_ATTEMPTS", "999")
        monkeypatch.delenv("FILEUTILS_STABLE_SETTLE_MS", raising=False)
        src = tmp_path / "in.txt"
        src.write_text("abc")
        with patch("stablefs.transfer.is_stable", return_value=True) as mock_stable:
            copy_file(src, tmp_path / "out.txt")
        mock_stable.assert_called_once_with(src, 5, pytest.approx(0.5))

    def test_env_reread_each_call(self, tmp_path, monkeypatch):
        src = tmp_path / "in.txt"
        src.write_text("abc")
        with patch("stablefs.transfer.is_stable", return_value=True) as mock_stable:
            monkeypatch.setenv("FILEUTILS_STABLE_ATTEMPTS", "4")
            copy_file(src, tmp_path / "a.txt")
            monkeypatch.setenv("FILEUTILS_STABLE_ATTEMPTS", "6")
            copy_file(src, tmp_path / "b.txt")
        assert [c.args[1] for c in mock_stable.call_args_list] == [4, 6]


class TestMoveFile:
    def test_renames(self, tmp_path):
        src = tmp_path / "a.txt"
        src.write_text("data")
        dst = tmp_path / "b.txt"
        assert move_file(src, dst) == dst
        assert not src.exists()
        assert dst.read_text() == "data"

    def test_replaces_existing_dst(self, tmp_path):
        src = tmp_path / "a.txt"
        src.write_text("new")
        dst = tmp_path / "b.txt"
        dst.write_text("old")
        move_file(src, dst)
        assert dst.read_text() == "new"

    def test_missing_source(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            move_file(tmp_path / "missing", tmp_path / "b.txt")

    def test_cross_device_not_retried(self, tmp_path):
        src = tmp_path / "a.txt"
        src.write_text("data")
        exdev = OSError(errno.EXDEV, "Invalid cross-device link")
        with patch("stablefs.transfer.os.rename", side_effect=exdev):
            with pytest.raises(OSError) as exc_info:
                move_file(src, tmp_path / "elsewhere.txt")
        assert exc_info.value.errno == errno.EXDEV
        assert src.exists()
        assert not (tmp_path / "elsewhere.txt").exists()
