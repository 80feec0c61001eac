"""
Tests unitaires pour les entites ArtifactSet, MediaMetadata et Media.
"""

from albumforge.core.entities import (
    ArtifactSet,
    Media,
    MediaMetadata,
    MediaType,
    OriginalArtifact,
    SizeArtifact,
)
from albumforge.core.value_objects import CurrentPaths, LegacyPaths


def _artifact_set() -> ArtifactSet:
    sizes = {
        name: SizeArtifact(
            path=f"/uploads/albums/1/{name}-tok.jpg",
            webp_path=f"/uploads/albums/1/{name}-tok.webp",
            width=100,
            height=80,
            byte_size=1000,
            webp_byte_size=700,
        )
        for name in ("thumbnail", "medium", "full")
    }
    return ArtifactSet(
        token="tok",
        album_id="1",
        media_type=MediaType.IMAGE,
        original=OriginalArtifact(
            path="/uploads/albums/1/original-tok.jpg", width=100, height=80, byte_size=5000
        ),
        sizes=sizes,
    )


class TestArtifactSet:
    """Tests de ArtifactSet."""

    def test_all_paths_lists_seven_files(self):
        paths = _artifact_set().all_paths()
        assert len(paths) == 7
        assert paths[0] == "/uploads/albums/1/original-tok.jpg"
        assert all("tok" in path for path in paths)

    def test_path_for(self):
        artifacts = _artifact_set()
        assert artifacts.path_for("original") == "/uploads/albums/1/original-tok.jpg"
        assert artifacts.path_for("medium") == "/uploads/albums/1/medium-tok.jpg"
        assert artifacts.path_for("huge") is None

    def test_to_file_sizes_shape(self):
        """Forme persistee : path, webpPath (sauf original), width, height, size."""
        file_sizes = _artifact_set().to_file_sizes()
        assert list(file_sizes) == ["original", "thumbnail", "medium", "full"]
        assert "webpPath" not in file_sizes["original"]
        assert file_sizes["medium"] == {
            "path": "/uploads/albums/1/medium-tok.jpg",
            "webpPath": "/uploads/albums/1/medium-tok.webp",
            "width": 100,
            "height": 80,
            "size": 1000,
        }


class TestMediaMetadata:
    def test_dict_uses_camel_case(self):
        metadata = MediaMetadata(format="png", width=4, height=3, has_alpha=True)
        data = metadata.to_dict()
        assert data["hasAlpha"] is True
        assert MediaMetadata.from_dict(data) == metadata

    def test_from_dict_defaults(self):
        metadata = MediaMetadata.from_dict({})
        assert metadata.orientation == 1
        assert metadata.has_alpha is False


class TestMediaPathView:
    def test_nested_record(self):
        media = Media(album_id="1", file_sizes=_artifact_set().to_file_sizes())
        assert isinstance(media.path_view, CurrentPaths)

    def test_legacy_record(self):
        media = Media(album_id="1", url="public/uploads/a.jpg")
        assert isinstance(media.path_view, LegacyPaths)
