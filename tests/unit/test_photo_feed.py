from pagesync.photo_feed import FEED_CAPACITY
from pagesync.photo_feed import PhotoFeed
from pagesync.schemas import Photo


def make_photo(caption):
    return Photo(url=f"data:image/png;base64,{caption}", caption=caption)


def test_capacity_is_fifty():
    assert FEED_CAPACITY == 50


def test_append_keeps_insertion_order():
    feed = PhotoFeed()
    for caption in ("1", "2", "3"):
        feed.append(make_photo(caption))

    assert [p.caption for p in feed.snapshot()] == ["1", "2", "3"]


def test_fifty_first_photo_evicts_the_oldest():
    feed = PhotoFeed()
    for i in range(1, 52):
        feed.append(make_photo(str(i)))

    captions = [p.caption for p in feed.snapshot()]
    assert len(captions) == 50
    assert captions == [str(i) for i in range(2, 52)]


def test_length_never_exceeds_capacity():
    feed = PhotoFeed()
    for i in range(120):
        feed.append(make_photo(str(i)))
        assert len(feed) <= FEED_CAPACITY

    assert [p.caption for p in feed.snapshot()] == [str(i) for i in range(70, 120)]


def test_snapshot_does_not_mutate():
    feed = PhotoFeed()
    feed.append(make_photo("1"))

    snapshot = feed.snapshot()
    snapshot.clear()

    assert len(feed) == 1


def test_clear():
    feed = PhotoFeed()
    feed.append(make_photo("1"))
    feed.clear()

    assert feed.snapshot() == []
