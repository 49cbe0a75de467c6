"""Audio features computed by Spotify for a track."""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Self

from attrs import define

from .shared import (
    ObjectType,
    as_object,
    duration_from_ms,
    duration_to_ms,
    join,
    object_type,
    require,
    require_float,
)


@define(frozen=True, slots=True)
class AudioFeatures:
    """Acoustic attributes of a single track.

    Most attributes are confidence values in 0.0..1.0. ``loudness`` is in
    decibels, ``tempo`` in beats per minute, ``key`` a pitch class (-1 when
    no key was detected) and ``mode`` 1 for major, 0 for minor.
    """

    acousticness: float
    analysis_url: str
    danceability: float
    duration: timedelta
    energy: float
    id: str
    instrumentalness: float
    key: int
    liveness: float
    loudness: float
    mode: int
    speechiness: float
    tempo: float
    time_signature: int
    track_href: str
    uri: str
    valence: float
    type: ObjectType = ObjectType.AUDIO_FEATURES

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            acousticness=require_float(data, "acousticness", path),
            analysis_url=require(data, "analysis_url", str, path),
            danceability=require_float(data, "danceability", path),
            duration=duration_from_ms(require(data, "duration_ms", int, path), join(path, "duration_ms")),
            energy=require_float(data, "energy", path),
            id=require(data, "id", str, path),
            instrumentalness=require_float(data, "instrumentalness", path),
            key=require(data, "key", int, path),
            liveness=require_float(data, "liveness", path),
            loudness=require_float(data, "loudness", path),
            mode=require(data, "mode", int, path),
            speechiness=require_float(data, "speechiness", path),
            tempo=require_float(data, "tempo", path),
            time_signature=require(data, "time_signature", int, path),
            track_href=require(data, "track_href", str, path),
            type=object_type(data, path, ObjectType.AUDIO_FEATURES),
            uri=require(data, "uri", str, path),
            valence=require_float(data, "valence", path),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "acousticness": self.acousticness,
            "analysis_url": self.analysis_url,
            "danceability": self.danceability,
            "duration_ms": duration_to_ms(self.duration),
            "energy": self.energy,
            "id": self.id,
            "instrumentalness": self.instrumentalness,
            "key": self.key,
            "liveness": self.liveness,
            "loudness": self.loudness,
            "mode": self.mode,
            "speechiness": self.speechiness,
            "tempo": self.tempo,
            "time_signature": self.time_signature,
            "track_href": self.track_href,
            "type": self.type.value,
            "uri": self.uri,
            "valence": self.valence,
        }
