"""Tests for per-item sort keys."""

import math

import pytest

from sort_keys import (
    SortCriterion, UnparsableDateError, has_sort_key, sort_key, step_sort_index,
)


@pytest.mark.parametrize('name, expected', [
    ('rgb', SortCriterion.RGB),
    ('step', SortCriterion.STEP),
    ('HSV', SortCriterion.STEP),
    ('lum', SortCriterion.LUMINOSITY),
    ('luminosity', SortCriterion.LUMINOSITY),
    (' year ', SortCriterion.YEAR),
])
def test_parse_criterion(name, expected):
    assert SortCriterion.parse(name) is expected


def test_parse_unknown_criterion():
    with pytest.raises(ValueError, match='Unknown sort criterion'):
        SortCriterion.parse('bogus')


def test_rgb_key_is_truncated_hue(make_item):
    assert sort_key(make_item('a', (0, 255, 0)), SortCriterion.RGB) == 120
    assert sort_key(make_item('b', (0, 0, 255)), SortCriterion.RGB) == 240


def test_luminosity_key_is_not_rooted(make_item):
    assert sort_key(make_item('a', (0, 255, 0)), SortCriterion.LUMINOSITY) == 176


def test_year_key(make_item):
    assert sort_key(make_item('a', date='1999'), SortCriterion.YEAR) == 1999


@pytest.mark.parametrize('date', [None, '', 'unknown', '1999-05-12', '+1999', '1_999', '-5'])
def test_year_key_rejects_non_years(make_item, date):
    item = make_item('a', date=date)
    with pytest.raises(UnparsableDateError) as excinfo:
        sort_key(item, SortCriterion.YEAR)
    assert excinfo.value.item is item
    assert not has_sort_key(item, SortCriterion.YEAR)


def test_non_year_criteria_ignore_dates(make_item):
    item = make_item('a', (10, 20, 30), date='unknown')
    for criterion in (SortCriterion.RGB, SortCriterion.STEP, SortCriterion.LUMINOSITY):
        assert isinstance(sort_key(item, criterion), int)


def test_step_index_values():
    # red: hue 0, value 100, sqrt(61.455) ~ 7.84
    assert step_sort_index(255, 0, 0) == 807
    # green: hue 120, value 100, sqrt(176.205) ~ 13.27
    assert step_sort_index(0, 255, 0) == 1773
    assert step_sort_index(0, 0, 0) == 0


def test_step_index_groups_by_hue():
    reds = [step_sort_index(v, 0, 0) for v in (80, 160, 255)]
    blues = [step_sort_index(0, 0, v) for v in (80, 160, 255)]
    assert max(reds) < min(blues)


def test_year_key_allows_surrounding_whitespace(make_item):
    assert sort_key(make_item('a', date=' 2004 '), SortCriterion.YEAR) == 2004


def test_step_index_inverts_odd_bands():
    # hue 0.375 scales to 3, an odd band: value and luminosity run backwards
    lum = math.sqrt(0.241 * 200 + 0.691 * 41 + 0.068 * 40)
    expected = int(3 + (8 - lum) + (8 - 200 / 255 * 800))
    assert expected == -617
    assert step_sort_index(200, 41, 40) == expected
