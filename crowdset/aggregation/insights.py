"""
Crowd insights: the top genres and artists of an event's guests.
"""

from dataclasses import dataclass
from typing import List

from crowdset.aggregation.aggregator import AggregationResult, top_counts

TOP_GENRES = 5
TOP_ARTISTS = 10


@dataclass(frozen=True)
class GenreShare:
    name: str
    count: int
    percentage: int  # share of guests, rounded


@dataclass(frozen=True)
class ArtistCount:
    name: str
    count: int


@dataclass(frozen=True)
class CrowdInsights:
    total_guests: int
    top_genres: List[GenreShare]
    top_artists: List[ArtistCount]


def crowd_insights(
    result: AggregationResult,
    top_genres: int = TOP_GENRES,
    top_artists: int = TOP_ARTISTS,
) -> CrowdInsights:
    """Summarize the most listed genres and artists of an event."""
    guests = result.total_guests

    genres = [
        GenreShare(
            name=c.name,
            count=c.count,
            percentage=round(c.count / guests * 100) if guests else 0,
        )
        for c in top_counts(result.genres, top_genres)
    ]
    artists = [
        ArtistCount(name=c.name, count=c.count)
        for c in top_counts(result.artists, top_artists)
    ]

    return CrowdInsights(total_guests=guests, top_genres=genres, top_artists=artists)
