"""
Tests unitaires pour le cycle de vie des media.

Base SQLite en memoire et vrai systeme de fichiers (tmp_path) : on verifie
qu'aucune ligne ne reference un fichier absent, qu'aucun fichier d'un upload
rejete ne subsiste et que les agregats de l'album restent exacts.
"""

from pathlib import Path

import pytest

from albumforge.core.entities import Album, MediaType
from albumforge.core.errors import (
    AlbumNotFoundError,
    GenerationError,
    InputError,
    MediaNotFoundError,
)
from albumforge.core.value_objects import file_paths
from albumforge.services.lifecycle import UploadState

VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 128


class AlbumDeletingGenerator:
    """Generateur qui supprime l'album pendant la generation."""

    def __init__(self, inner, album_repo) -> None:
        self._inner = inner
        self._album_repo = album_repo

    def generate(self, raw, original_filename, album_id):
        artifacts = self._inner.generate(raw, original_filename, album_id)
        self._album_repo.delete(album_id)
        return artifacts

    def store_video(self, raw, original_filename, album_id):
        return self._inner.store_video(raw, original_filename, album_id)


def _files(directory: Path) -> list[str]:
    if not directory.exists():
        return []
    return sorted(p.name for p in directory.iterdir())


def _assert_files_exist(layout, media) -> None:
    for path in file_paths(media.path_view):
        assert layout.to_fs_path(path).exists(), path


# ============================================================================
# Creation
# ============================================================================


class TestCreateArtifacts:
    """Tests de LifecycleManager.create_artifacts."""

    def test_first_image_persisted_with_cover(
        self, lifecycle, album_repo, layout, album, jpeg_bytes
    ):
        result = lifecycle.create_artifacts(jpeg_bytes, "plage.jpg", album.id, caption="Plage")

        assert result.state is UploadState.COMPLETE
        assert result.success is True
        media = result.media
        assert media.id is not None
        assert media.media_type is MediaType.IMAGE
        assert media.caption == "Plage"
        assert media.url == media.file_sizes["original"]["path"]
        assert media.optimized == media.file_sizes["medium"]["path"]
        assert media.thumbnail == media.file_sizes["thumbnail"]["path"]
        assert set(media.file_sizes) == {"original", "thumbnail", "medium", "full"}
        _assert_files_exist(layout, media)

        stored = album_repo.get_by_id(album.id)
        assert stored.total_media == 1
        assert stored.cover_image == media.optimized

    def test_second_upload_keeps_cover(self, lifecycle, album_repo, album, jpeg_bytes):
        first = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id).media
        lifecycle.create_artifacts(jpeg_bytes, "b.jpg", album.id)

        stored = album_repo.get_by_id(album.id)
        assert stored.total_media == 2
        assert stored.cover_image == first.optimized

    def test_video_stored_without_cover(self, lifecycle, album_repo, layout, album):
        result = lifecycle.create_artifacts(VIDEO_BYTES, "clip.mp4", album.id)

        media = result.media
        assert media.media_type is MediaType.VIDEO
        assert media.url == media.optimized
        assert media.thumbnail == ""
        assert layout.to_fs_path(media.url).read_bytes() == VIDEO_BYTES
        stored = album_repo.get_by_id(album.id)
        assert stored.total_media == 1
        assert stored.cover_image == ""

    def test_unknown_album(self, lifecycle, layout, jpeg_bytes):
        with pytest.raises(AlbumNotFoundError):
            lifecycle.create_artifacts(jpeg_bytes, "a.jpg", "9999")
        assert not layout.album_dir("9999").exists()

    def test_invalid_image_leaves_nothing(self, lifecycle, media_repo, album_repo, layout, album):
        with pytest.raises(InputError):
            lifecycle.create_artifacts(b"garbage", "a.jpg", album.id)

        assert media_repo.count_by_album(album.id) == 0
        assert album_repo.get_by_id(album.id).total_media == 0
        assert _files(layout.album_dir(album.id)) == []

    def test_generation_failure_leaves_nothing(
        self, lifecycle, media_repo, layout, album, jpeg_bytes, monkeypatch
    ):
        from albumforge.adapters.file_system import FileSystemAdapter

        original_write = FileSystemAdapter.write_bytes
        calls = []

        def failing_write(self, path, data):
            calls.append(path)
            if len(calls) == 4:
                raise OSError("disque plein")
            original_write(self, path, data)

        monkeypatch.setattr(FileSystemAdapter, "write_bytes", failing_write)

        with pytest.raises(GenerationError):
            lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id)

        assert media_repo.count_by_album(album.id) == 0
        assert _files(layout.album_dir(album.id)) == []

    def test_rejects_non_content_fields(self, lifecycle, album, jpeg_bytes):
        with pytest.raises(ValueError):
            lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id, url="/x.jpg")

    def test_album_deleted_during_generation(
        self,
        media_repo,
        album_repo,
        generator,
        cover_selector,
        layout,
        file_system,
        album,
        jpeg_bytes,
    ):
        """L'album disparait pendant la generation : fichiers purges, rien persiste."""
        from albumforge.services.lifecycle import LifecycleManager

        manager = LifecycleManager(
            media_repo,
            album_repo,
            AlbumDeletingGenerator(generator, album_repo),
            cover_selector,
            layout,
            file_system,
        )

        with pytest.raises(AlbumNotFoundError):
            manager.create_artifacts(jpeg_bytes, "a.jpg", album.id)

        assert media_repo.list_all() == []
        assert not layout.album_dir(album.id).exists()

    def test_save_failure_purges_files(
        self, lifecycle, media_repo, album_repo, layout, album, jpeg_bytes, monkeypatch
    ):
        """Un echec d'enregistrement apres generation ne laisse aucun fichier."""

        def failing_save(media):
            raise RuntimeError("base verrouillee")

        monkeypatch.setattr(media_repo, "save", failing_save)

        with pytest.raises(RuntimeError, match="base verrouillee"):
            lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id)

        assert _files(layout.album_dir(album.id)) == []
        assert album_repo.get_by_id(album.id).total_media == 0
        assert album_repo.get_by_id(album.id).cover_image == ""


class TestUploadMany:
    """Tests de LifecycleManager.upload_many."""

    def test_partial_failure(self, lifecycle, album_repo, album, jpeg_bytes):
        files = [("a.jpg", jpeg_bytes), ("broken.jpg", b"nope"), ("c.jpg", jpeg_bytes)]
        batch = lifecycle.upload_many(files, album.id, tags=["ete"])

        assert [r.state for r in batch.results] == [
            UploadState.COMPLETE,
            UploadState.FAILED,
            UploadState.COMPLETE,
        ]
        assert [m.order for m in batch.uploaded] == [0, 2]
        assert all(m.tags == ("ete",) for m in batch.uploaded)
        assert len(batch.errors) == 1
        assert batch.errors[0].startswith("broken.jpg:")
        assert album_repo.get_by_id(album.id).total_media == 2

    def test_unknown_album_reports_each_file(self, lifecycle, jpeg_bytes):
        batch = lifecycle.upload_many([("a.jpg", jpeg_bytes)], "9999")
        assert batch.uploaded == []
        assert "Album introuvable" in batch.errors[0]


# ============================================================================
# Modification
# ============================================================================


class TestUpdateAndReplace:
    def test_update_content(self, lifecycle, album, jpeg_bytes):
        media = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id).media
        updated = lifecycle.update_content(media.id, caption="Nouveau", featured=True)
        assert updated.caption == "Nouveau"
        assert updated.featured is True
        assert updated.file_sizes == media.file_sizes

    def test_update_content_rejects_paths(self, lifecycle, album, jpeg_bytes):
        media = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id).media
        with pytest.raises(ValueError):
            lifecycle.update_content(media.id, optimized="/other.jpg")

    def test_update_content_missing(self, lifecycle):
        with pytest.raises(MediaNotFoundError):
            lifecycle.update_content("9999", caption="x")

    def test_replace_media(self, lifecycle, layout, album, jpeg_bytes, image_factory):
        old = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id, caption="Garde").media
        result = lifecycle.replace_media(old.id, image_factory(width=640, height=480), "b.jpg")

        new = result.media
        assert new.id != old.id
        assert new.caption == "Garde"
        assert new.original_filename == "b.jpg"
        for path in file_paths(old.path_view):
            assert not layout.to_fs_path(path).exists()
        _assert_files_exist(layout, new)


# ============================================================================
# Suppression
# ============================================================================


class TestDeleteOne:
    """Tests de LifecycleManager.delete_one."""

    def test_deletes_files_record_and_count(
        self, lifecycle, media_repo, album_repo, layout, album, jpeg_bytes
    ):
        media = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id).media
        result = lifecycle.delete_one(media.id)

        assert result.files_deleted == 7
        assert result.file_errors == []
        assert media_repo.get_by_id(media.id) is None
        assert _files(layout.album_dir(album.id)) == []
        stored = album_repo.get_by_id(album.id)
        assert stored.total_media == 0
        assert stored.cover_image == ""
        assert result.cover_changed is True

    def test_missing_file_is_not_an_error(self, lifecycle, layout, album, jpeg_bytes):
        media = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id).media
        layout.to_fs_path(media.file_sizes["full"]["webpPath"]).unlink()

        result = lifecycle.delete_one(media.id)
        assert result.files_deleted == 6
        assert result.file_errors == []

    def test_cover_moves_to_next_image(self, lifecycle, album_repo, album, jpeg_bytes):
        first = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id, order=0).media
        second = lifecycle.create_artifacts(jpeg_bytes, "b.jpg", album.id, order=1).media

        result = lifecycle.delete_one(first.id)

        assert result.cover_changed is True
        assert album_repo.get_by_id(album.id).cover_image == second.optimized

    def test_other_cover_untouched(self, lifecycle, album_repo, album, jpeg_bytes):
        first = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id, order=0).media
        second = lifecycle.create_artifacts(jpeg_bytes, "b.jpg", album.id, order=1).media

        result = lifecycle.delete_one(second.id)

        assert result.cover_changed is False
        assert album_repo.get_by_id(album.id).cover_image == first.optimized

    def test_legacy_record(self, lifecycle, media_repo, layout, album):
        """Un enregistrement legacy (champs plats prefixes public/) est supprime."""
        from albumforge.core.entities import Media

        directory = layout.ensure_album_dir(album.id)
        (directory / "old.jpg").write_bytes(b"x")
        (directory / "old-small.jpg").write_bytes(b"x")
        media = media_repo.save(
            Media(
                album_id=album.id,
                url=f"public/uploads/albums/{album.id}/old.jpg",
                optimized=f"public/uploads/albums/{album.id}/old.jpg",
                thumbnail=f"public/uploads/albums/{album.id}/old-small.jpg",
            )
        )

        result = lifecycle.delete_one(media.id)
        assert result.files_deleted == 2
        assert _files(directory) == []

    def test_unknown_media(self, lifecycle):
        with pytest.raises(MediaNotFoundError):
            lifecycle.delete_one("9999")

    def test_bulk_delete(self, lifecycle, album, jpeg_bytes):
        a = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id).media
        b = lifecycle.create_artifacts(jpeg_bytes, "b.jpg", album.id).media

        result = lifecycle.bulk_delete([a.id, "9999", b.id])
        assert result.deleted_count == 2
        assert result.files_deleted == 14
        assert result.not_found == ["9999"]


class TestDeleteAlbumCascade:
    """Tests de LifecycleManager.delete_album_cascade."""

    def test_removes_everything(
        self, lifecycle, media_repo, album_repo, cover_selector, layout, album, jpeg_bytes
    ):
        for name in ("a.jpg", "b.jpg", "c.jpg"):
            lifecycle.create_artifacts(jpeg_bytes, name, album.id)
        cover_selector.generate_square_cover(album.id)

        result = lifecycle.delete_album_cascade(album.id)

        assert result.found is True
        assert result.media_deleted_count == 3
        assert result.files_deleted_count == 21
        assert result.file_deletion_error_count == 0
        assert result.square_cover_deleted is True
        assert result.directory_removed is True
        assert album_repo.get_by_id(album.id) is None
        assert media_repo.list_by_album(album.id) == []
        assert not layout.album_dir(album.id).exists()
        assert not layout.cover_fs_path(album.id).exists()

    def test_idempotent(self, lifecycle, album, jpeg_bytes):
        lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id)
        lifecycle.delete_album_cascade(album.id)

        second = lifecycle.delete_album_cascade(album.id)
        assert second.found is False
        assert second.media_deleted_count == 0

    def test_retry_after_interrupted_cascade(
        self, lifecycle, media_repo, album_repo, layout, album, jpeg_bytes, monkeypatch
    ):
        """Une cascade interrompue apres la suppression de l'album est terminee au rappel."""
        lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id)
        original_delete = media_repo.delete_by_album
        calls = []

        def failing_once(album_id):
            calls.append(album_id)
            if len(calls) == 1:
                raise RuntimeError("connexion perdue")
            return original_delete(album_id)

        monkeypatch.setattr(media_repo, "delete_by_album", failing_once)

        with pytest.raises(RuntimeError):
            lifecycle.delete_album_cascade(album.id)
        assert album_repo.get_by_id(album.id) is None
        assert media_repo.count_by_album(album.id) == 1

        retry = lifecycle.delete_album_cascade(album.id)

        assert retry.found is False
        assert retry.media_deleted_count == 1
        assert media_repo.count_by_album(album.id) == 0
        assert not layout.album_dir(album.id).exists()

    def test_keeps_directory_with_late_file(self, lifecycle, layout, album, jpeg_bytes):
        """Un fichier arrive pendant la cascade empeche la suppression du repertoire."""
        lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id)
        late = layout.album_dir(album.id) / "medium-late.jpg"
        late.write_bytes(b"x")

        result = lifecycle.delete_album_cascade(album.id)

        assert result.files_deleted_count == 7
        assert result.directory_removed is False
        assert _files(layout.album_dir(album.id)) == ["medium-late.jpg"]

    def test_empty_album(self, lifecycle, album_repo, album):
        result = lifecycle.delete_album_cascade(album.id)
        assert result.found is True
        assert result.media_deleted_count == 0
        assert result.directory_removed is False
        assert album_repo.get_by_id(album.id) is None

    def test_other_album_untouched(self, lifecycle, album_repo, layout, album, jpeg_bytes):
        other = album_repo.save(Album(title="Autre", slug="autre"))
        kept = lifecycle.create_artifacts(jpeg_bytes, "k.jpg", other.id).media
        lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id)

        lifecycle.delete_album_cascade(album.id)

        _assert_files_exist(layout, kept)
        assert album_repo.get_by_id(other.id).total_media == 1


# ============================================================================
# Agregats
# ============================================================================


class TestAggregate:
    def test_aggregate(self, lifecycle, layout, album, jpeg_bytes):
        media = lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id).media

        aggregate = lifecycle.aggregate(album.id)
        assert aggregate.total_media_count == 1
        assert aggregate.cover_image_path == media.optimized
        assert aggregate.storage_directory == f"/uploads/albums/{album.id}"
        expected = sum(p.stat().st_size for p in layout.album_dir(album.id).iterdir())
        assert aggregate.storage_size_bytes == expected

    def test_aggregate_unknown(self, lifecycle):
        with pytest.raises(AlbumNotFoundError):
            lifecycle.aggregate("9999")

    def test_refresh_media_count_repairs_drift(self, lifecycle, album_repo, album, jpeg_bytes):
        lifecycle.create_artifacts(jpeg_bytes, "a.jpg", album.id)
        album_repo.set_media_count(album.id, 42)

        assert lifecycle.refresh_media_count(album.id) == 1
        assert album_repo.get_by_id(album.id).total_media == 1
