"""Remote track listing extraction for Bandcamp and Beatport pages."""

from __future__ import annotations

import logging

from tracklist_renamer.models import AlbumData
from tracklist_renamer.stores import bandcamp, beatport
from tracklist_renamer.stores.client import StoreClient

logger = logging.getLogger(__name__)


def is_beatport_url(url: str) -> bool:
    return "beatport.com" in url.lower()


def parse_album_page(html: str, url: str) -> AlbumData:
    """Extract the release behind *url* from already fetched HTML."""
    if is_beatport_url(url):
        return beatport.parse_release_page(html, url)
    return bandcamp.parse_album_page(html, url)


def fetch_album_data(url: str, client: StoreClient) -> AlbumData:
    """Fetch a store page and extract its track listing.

    Raises:
        FetchError: If the page cannot be fetched.
        AlbumDataNotFoundError: If the page has no recognizable listing.
        AlbumDataDecodeError: If the listing cannot be decoded.
    """
    html = client.get_page(url)
    album = parse_album_page(html, url)
    logger.info(
        "Found %d tracks on %s for %r by %r",
        len(album.tracks),
        album.source,
        album.title,
        album.artist,
    )
    return album
