import logging

from PdfCompare.engines import ENGINES, get_image_engine
from PdfCompare.engines.native import NativeEngine


def test_default_engine_is_native():
    assert isinstance(get_image_engine(), NativeEngine)
    assert get_image_engine("native").name == "native"


def test_image_magick_is_registered():
    assert "imageMagick" in ENGINES


def test_unknown_engine_falls_back_to_native(caplog):
    with caplog.at_level(logging.WARNING, logger="PdfCompare.engines"):
        engine = get_image_engine("graphicsMagick")
    assert isinstance(engine, NativeEngine)
    assert "graphicsMagick" in caplog.text


def test_registered_engine_is_used(fake_engine):
    assert get_image_engine("fake") is fake_engine
