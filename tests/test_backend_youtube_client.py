from conftest import FakeTransport
from backend.youtube_client import YoutubeAdapter, trailer_query


def test_trailer_query_skips_missing_year():
    assert trailer_query("Inception", 2010) == "Inception 2010 official trailer"
    assert trailer_query("Inception", None) == "Inception official trailer"
    assert trailer_query("Inception", "") == "Inception official trailer"


def test_trailer_thumbnail_from_first_item():
    transport = FakeTransport(
        provider="youtube",
        routes={"/search": {"items": [{"id": {"kind": "youtube#video", "videoId": "YoHD9XEInc0"}}]}},
    )
    out = YoutubeAdapter(transport).trailer_thumbnail("Inception", 2010)

    assert out == "https://img.youtube.com/vi/YoHD9XEInc0/maxresdefault.jpg"
    assert transport.calls[0].params == {"q": "Inception 2010 official trailer"}


def test_trailer_thumbnail_none_when_no_items_or_no_video_id():
    empty = FakeTransport(routes={"/search": {"items": []}})
    assert YoutubeAdapter(empty).trailer_thumbnail("X") is None

    channel = FakeTransport(routes={"/search": {"items": [{"id": {"kind": "youtube#channel"}}]}})
    assert YoutubeAdapter(channel).trailer_thumbnail("X") is None
