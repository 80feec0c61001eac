"""
Tests unitaires pour l'adaptateur systeme de fichiers.

Verifie l'ecriture atomique, la tolerance aux fichiers absents et la
suppression conditionnelle des repertoires.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from albumforge.adapters.file_system import FileSystemAdapter


@pytest.fixture
def fs() -> FileSystemAdapter:
    return FileSystemAdapter()


class TestWriteBytes:
    """Tests de l'ecriture atomique."""

    def test_writes_content_and_creates_parents(self, fs, tmp_path):
        target = tmp_path / "a" / "b" / "file.jpg"
        fs.write_bytes(target, b"data")
        assert target.read_bytes() == b"data"

    def test_leaves_no_temp_file(self, fs, tmp_path):
        fs.write_bytes(tmp_path / "file.jpg", b"data")
        assert [p.name for p in tmp_path.iterdir()] == ["file.jpg"]

    def test_overwrites_existing(self, fs, tmp_path):
        target = tmp_path / "file.jpg"
        target.write_bytes(b"old")
        fs.write_bytes(target, b"new")
        assert target.read_bytes() == b"new"

    def test_failed_rename_removes_temp(self, fs, tmp_path):
        """Un echec du renommage ne laisse ni cible ni fichier temporaire."""
        target = tmp_path / "file.jpg"
        with patch("albumforge.adapters.file_system.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                fs.write_bytes(target, b"data")
        assert list(tmp_path.iterdir()) == []


class TestDelete:
    def test_existing_file(self, fs, tmp_path):
        target = tmp_path / "file.jpg"
        target.write_bytes(b"x")
        assert fs.delete(target) is True
        assert not target.exists()

    def test_missing_file_is_not_an_error(self, fs, tmp_path):
        assert fs.delete(tmp_path / "missing.jpg") is False

    def test_other_errors_propagate(self, fs, tmp_path):
        """Supprimer un repertoire avec unlink n'est pas un ENOENT."""
        directory = tmp_path / "dir"
        directory.mkdir()
        with pytest.raises(OSError):
            fs.delete(directory)


class TestSizeAndListing:
    def test_get_size(self, fs, tmp_path):
        target = tmp_path / "file.jpg"
        target.write_bytes(b"12345")
        assert fs.get_size(target) == 5

    def test_get_size_missing_is_zero(self, fs, tmp_path):
        assert fs.get_size(tmp_path / "missing") == 0

    def test_list_dir_sorted(self, fs, tmp_path):
        for name in ("b", "a", "c"):
            (tmp_path / name).write_bytes(b"")
        assert [p.name for p in fs.list_dir(tmp_path)] == ["a", "b", "c"]

    def test_list_dir_missing_raises(self, fs, tmp_path):
        with pytest.raises(FileNotFoundError):
            fs.list_dir(tmp_path / "missing")


class TestRemoveEmptyDir:
    """Tests de remove_empty_dir."""

    def test_removes_empty_directory(self, fs, tmp_path):
        directory = fs.ensure_dir(tmp_path / "album")
        assert fs.remove_empty_dir(directory) is True
        assert not directory.exists()

    def test_keeps_non_empty_directory(self, fs, tmp_path):
        directory = fs.ensure_dir(tmp_path / "album")
        (directory / "upload.jpg").write_bytes(b"x")
        assert fs.remove_empty_dir(directory) is False
        assert (directory / "upload.jpg").exists()

    def test_missing_directory(self, fs, tmp_path):
        assert fs.remove_empty_dir(Path(tmp_path / "missing")) is False

    def test_ensure_dir_is_idempotent(self, fs, tmp_path):
        directory = tmp_path / "x" / "y"
        fs.ensure_dir(directory)
        fs.ensure_dir(directory)
        assert directory.is_dir()
