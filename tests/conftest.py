"""Shared fixtures for Quote Card Editor tests."""

import base64
import io

import pytest
from PIL import Image

from quotecard.workers.card_renderer import CardRenderer


def fake_measure_for(weight: str, size: int, family: str):
    """Deterministic width function: every character is half an em wide."""
    return lambda text: len(text) * size * 0.5


def make_data_url(color=(255, 0, 0, 255), size=(10, 10), fmt="PNG") -> str:
    img = Image.new("RGBA", size, color)
    output = io.BytesIO()
    img.save(output, format=fmt)
    encoded = base64.b64encode(output.getvalue()).decode("ascii")
    return f"data:image/{fmt.lower()};base64,{encoded}"


@pytest.fixture
def measure_for():
    return fake_measure_for


@pytest.fixture
def red_data_url():
    return make_data_url()


@pytest.fixture
def renderer():
    """Renderer whose layout uses the fake width function."""
    r = CardRenderer()
    r.fonts.measurer = fake_measure_for
    return r


@pytest.fixture
def image_data_url():
    """Factory for solid-color image data URLs."""
    return make_data_url
