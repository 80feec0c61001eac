"""
Business entities representing core domain concepts.

Exports:
- Album: Album of media with authoritative aggregates
- AlbumAggregate: Snapshot of an album's counts, cover and storage
- Media: Image or video attached to an album
- MediaType: Image or video
- ArtifactSet, OriginalArtifact, SizeArtifact: Files produced for one upload
- MediaMetadata: Metadata probed from the source bytes
"""

from albumforge.core.entities.artifact import (
    ArtifactSet,
    MediaMetadata,
    MediaType,
    OriginalArtifact,
    SizeArtifact,
)
from albumforge.core.entities.media import CONTENT_FIELDS, Album, AlbumAggregate, Media

__all__ = [
    "Album",
    "AlbumAggregate",
    "ArtifactSet",
    "CONTENT_FIELDS",
    "Media",
    "MediaMetadata",
    "MediaType",
    "OriginalArtifact",
    "SizeArtifact",
]
