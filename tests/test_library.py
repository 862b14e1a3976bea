"""Tests for cover discovery, tag reading and filters."""

from library import (
    filter_items, find_covers, find_first_track, normalize_date, read_album_tags,
)
from models import CoverTags


def test_find_covers(tmp_path, make_image):
    make_image(tmp_path / 'Artist' / 'Album' / 'cover.JPG', (1, 1, 1))
    make_image(tmp_path / 'Other' / 'Cover.png', (2, 2, 2))
    make_image(tmp_path / 'Other' / 'folder.jpg', (3, 3, 3))
    (tmp_path / 'Other' / 'cover.txt').write_text('not a cover')

    covers = find_covers(tmp_path)

    assert [p.relative_to(tmp_path).as_posix() for p in covers] == [
        'Artist/Album/cover.JPG',
        'Other/Cover.png',
    ]


def test_find_covers_empty(tmp_path):
    assert find_covers(tmp_path) == []


def test_find_first_track(tmp_path):
    for name in ('02 - second.mp3', '01 - first.flac', 'notes.txt'):
        (tmp_path / name).write_bytes(b'')
    assert find_first_track(tmp_path).name == '01 - first.flac'


def test_find_first_track_falls_back(tmp_path):
    (tmp_path / 'b.ogg').write_bytes(b'')
    (tmp_path / 'a.ogg').write_bytes(b'')
    assert find_first_track(tmp_path).name == 'a.ogg'


def test_find_first_track_none(tmp_path):
    assert find_first_track(tmp_path) is None


def test_read_album_tags_without_tracks(tmp_path):
    assert read_album_tags(tmp_path) == CoverTags()


def test_read_album_tags_unreadable_track(tmp_path):
    (tmp_path / '01 - broken.mp3').write_bytes(b'\x00' * 64)
    assert read_album_tags(tmp_path) == CoverTags()


def test_normalize_date():
    assert normalize_date('1999-05-12') == '1999'
    assert normalize_date('2004') == '2004'
    assert normalize_date('unknown') == 'unknown'
    assert normalize_date('  ') is None
    assert normalize_date(None) is None


def test_filter_by_genre(make_item):
    items = [
        make_item('a', genres='Rock; Pop'),
        make_item('b', genres='Jazz'),
        make_item('c'),
    ]
    assert [i.file for i in filter_items(items, genres='pop;blues')] == ['a']


def test_filter_by_artist_and_year(make_item):
    items = [
        make_item('a', artist='Björk', date='1995'),
        make_item('b', artist='björk', date='1997'),
        make_item('c', artist='Other', date='1995'),
    ]
    assert [i.file for i in filter_items(items, artist='BJÖRK')] == ['a', 'b']
    assert [i.file for i in filter_items(items, artist='björk', year=1995)] == ['a']


def test_no_filters_keeps_everything(make_item):
    items = [make_item('a'), make_item('b')]
    assert filter_items(items) == items
