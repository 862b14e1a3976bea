"""Tests for RGB/HSV conversion and luminosity."""

import itertools
import math

import numpy as np
import pytest

from color_space import hsv_to_rgb, luminosity, luminosity_sqrt, rgb_to_hsv, rgb_to_hsv_array
from models import Color


@pytest.mark.parametrize('rgb, expected', [
    ((255, 0, 0), (0.0, 100.0, 100.0)),
    ((0, 255, 0), (120.0, 100.0, 100.0)),
    ((0, 0, 255), (240.0, 100.0, 100.0)),
    ((255, 0, 255), (300.0, 100.0, 100.0)),
    ((0, 0, 0), (0.0, 0.0, 0.0)),
    ((255, 255, 255), (0.0, 0.0, 100.0)),
])
def test_rgb_to_hsv_primaries(rgb, expected):
    hsv = rgb_to_hsv(*rgb)
    assert hsv == pytest.approx(expected)


def test_greys_are_achromatic():
    hsv = rgb_to_hsv(128, 128, 128)
    assert hsv.h == 0
    assert hsv.s == 0
    assert hsv.v == pytest.approx(128 / 255 * 100)


def test_hue_stays_in_range():
    for rgb in itertools.product(range(0, 256, 51), repeat=3):
        hsv = rgb_to_hsv(*rgb)
        assert 0 <= hsv.h < 360
        assert 0 <= hsv.s <= 100
        assert 0 <= hsv.v <= 100


def test_hsv_round_trip():
    for rgb in itertools.product(range(0, 256, 17), repeat=3):
        back = hsv_to_rgb(*rgb_to_hsv(*rgb))
        assert all(abs(a - b) <= 1 for a, b in zip((back.r, back.g, back.b), rgb)), rgb


def test_hsv_to_rgb_returns_color():
    assert hsv_to_rgb(240, 100, 100) == Color(0, 0, 255)


def test_luminosity_weights():
    assert luminosity(255, 255, 255) == pytest.approx(255)
    assert luminosity(0, 255, 0) == pytest.approx(176.205)
    assert luminosity(0, 0, 0) == 0


def test_luminosity_sqrt_is_rooted_form():
    assert luminosity_sqrt(255, 0, 0) == pytest.approx(math.sqrt(61.455))
    assert luminosity_sqrt(255, 0, 0) != pytest.approx(luminosity(255, 0, 0))


def test_vectorized_hsv_matches_scalar():
    rgb = np.array(list(itertools.product(range(0, 256, 51), repeat=3)) + [[200, 41, 40]])
    hsv = rgb_to_hsv_array(rgb)
    assert hsv.shape == (len(rgb), 3)
    for row, expected in zip(hsv, rgb):
        assert tuple(row) == pytest.approx(tuple(rgb_to_hsv(*expected)))
