import logging
import sys
import warnings
from pathlib import Path

import pytest

import tiled_json
from tiled_json import (
    Color, FormatError, MapIOError, MapJSONError, TiledJsonError, load_map,
)

from conftest import GIDS, map_doc, tile_layer_doc


def test_load_map_from_file(write_map, full_map_doc):
    tiled_map = load_map(write_map(full_map_doc))
    assert tiled_map.layers[0].data.tolist() == GIDS
    assert tiled_map.layer_by_name("Sky") is not None


def test_load_map_accepts_str_path(write_map):
    tiled_map = load_map(str(write_map(map_doc())))
    assert tiled_map.tilewidth == 32


@pytest.mark.parametrize("encoding,compression", [
    (None, None),
    ("base64", None),
    ("base64", "zlib"),
    ("base64", "gzip"),
])
def test_every_layer_encoding_loads_identically(write_map, encoding, compression):
    doc = map_doc(layers=[tile_layer_doc(GIDS, 3, 3, encoding=encoding,
                                         compression=compression)])
    assert load_map(write_map(doc)).layers[0].data.tolist() == GIDS


def test_missing_file(tmp_path):
    with pytest.raises(MapIOError) as info:
        load_map(tmp_path / "nowhere.json")
    assert isinstance(info.value, OSError)
    assert isinstance(info.value, TiledJsonError)


def test_malformed_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"width": 3,\n  "height": }', encoding="utf-8")
    with pytest.raises(MapJSONError) as info:
        load_map(path)
    assert info.value.line == 2


def test_unsupported_feature_fails_closed(write_map):
    with pytest.raises(FormatError):
        load_map(write_map(map_doc(infinite=True)))


def test_bad_color_falls_back_with_warning(write_map, caplog):
    with caplog.at_level(logging.WARNING, logger="tiled_json"):
        tiled_map = load_map(write_map(map_doc(backgroundcolor="#nothex")))
    assert tiled_map.backgroundcolor == Color(255, 0, 255, 255)
    assert "Invalid color" in caplog.text


def test_map_is_immutable(write_map):
    tiled_map = load_map(write_map(map_doc()))
    with pytest.raises(AttributeError):
        tiled_map.width = 10
    with pytest.raises(ValueError):
        tiled_map.layers[0].data[0] = 5


def test_deeply_nested_json(tmp_path):
    path = tmp_path / "deep.json"
    path.write_text("[" * 200000 + "]" * 200000, encoding="utf-8")
    with pytest.raises(MapJSONError) as info:
        load_map(path)
    assert info.value.line == 0


@pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"),
                    reason="no integer string conversion limit")
def test_oversized_integer_literal(tmp_path):
    path = tmp_path / "huge.json"
    path.write_text('{"width": ' + "1" * 10000 + "}", encoding="utf-8")
    with pytest.raises(MapJSONError):
        load_map(path)


def test_modules_compile_without_warnings():
    package_dir = Path(tiled_json.__file__).parent
    for source in sorted(package_dir.glob("*.py")):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source.read_text(encoding="utf-8"), str(source), "exec")
