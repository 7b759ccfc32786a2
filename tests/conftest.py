"""Shared fixtures: small in-memory Tiled JSON documents."""

import base64
import gzip
import json
import struct
import zlib

import pytest


GIDS = [1, 2, 3, 0, 0x80000005, 49, 50, 0x20000000 | 199, 200]


def pack_gids(gids):
    return struct.pack("<%dI" % len(gids), *gids)


def encode_gids(gids, compression=None):
    """base64 layer data as Tiled writes it."""
    raw = pack_gids(gids)
    if compression == "zlib":
        raw = zlib.compress(raw)
    elif compression == "gzip":
        raw = gzip.compress(raw)
    return base64.b64encode(raw).decode("ascii")


def tileset_doc(firstgid=1, tilecount=64, columns=8, name="terrain", **extra):
    doc = {
        "firstgid": firstgid,
        "name": name,
        "image": f"{name}.png",
        "imagewidth": columns * 32,
        "imageheight": (tilecount // max(columns, 1)) * 32,
        "tilewidth": 32,
        "tileheight": 32,
        "tilecount": tilecount,
        "columns": columns,
        "margin": 0,
        "spacing": 0,
    }
    doc.update(extra)
    return doc


def tile_layer_doc(gids, width, height, name="Ground", encoding=None,
                   compression=None, **extra):
    doc = {
        "type": "tilelayer",
        "id": 1,
        "name": name,
        "width": width,
        "height": height,
        "opacity": 1,
        "visible": True,
        "x": 0,
        "y": 0,
    }
    if encoding == "base64":
        doc["encoding"] = "base64"
        doc["compression"] = compression or ""
        doc["data"] = encode_gids(gids, compression)
    else:
        doc["data"] = list(gids)
    doc.update(extra)
    return doc


def map_doc(layers=None, tilesets=None, **extra):
    doc = {
        "type": "map",
        "version": "1.10",
        "tiledversion": "1.10.2",
        "orientation": "orthogonal",
        "renderorder": "right-down",
        "width": 3,
        "height": 3,
        "tilewidth": 32,
        "tileheight": 32,
        "infinite": False,
        "nextlayerid": 2,
        "nextobjectid": 1,
        "tilesets": tilesets if tilesets is not None else [tileset_doc()],
        "layers": layers if layers is not None else [tile_layer_doc(GIDS, 3, 3)],
    }
    doc.update(extra)
    return doc


@pytest.fixture
def full_map_doc():
    """A map exercising every layer kind, animations and collisions."""
    return map_doc(
        backgroundcolor="#80102030",
        properties=[
            {"name": "weather", "type": "string", "value": "rain"},
            {"name": "darkness", "type": "float", "value": 0.5},
        ],
        tilesets=[
            tileset_doc(
                firstgid=1, tilecount=64, columns=8, name="terrain",
                tiles=[
                    {
                        "id": 4,
                        "type": "water",
                        "animation": [
                            {"tileid": 4, "duration": 100},
                            {"tileid": 5, "duration": 100},
                        ],
                        "properties": [
                            {"name": "solid", "type": "bool", "value": False},
                        ],
                    },
                    {
                        "id": 10,
                        "objectgroup": {
                            "type": "objectgroup",
                            "name": "",
                            "draworder": "index",
                            "opacity": 1,
                            "visible": True,
                            "x": 0,
                            "y": 0,
                            "objects": [
                                {"id": 1, "x": 0, "y": 0, "width": 32, "height": 16},
                            ],
                        },
                    },
                ],
            ),
            tileset_doc(firstgid=65, tilecount=16, columns=4, name="props"),
        ],
        layers=[
            tile_layer_doc(GIDS, 3, 3, name="Ground", encoding="base64",
                           compression="zlib"),
            {
                "type": "group",
                "id": 2,
                "name": "Decor",
                "opacity": 0.5,
                "visible": True,
                "layers": [
                    {
                        "type": "objectgroup",
                        "id": 3,
                        "name": "Spawns",
                        "draworder": "topdown",
                        "objects": [
                            {"id": 1, "name": "player", "type": "spawn",
                             "x": 16, "y": 16, "point": True},
                            {"id": 2, "name": "zone", "x": 0, "y": 0,
                             "polygon": [{"x": 0, "y": 0}, {"x": 32, "y": 0},
                                         {"x": 32, "y": 32}]},
                            {"id": 3, "name": "barrel", "x": 64, "y": 64,
                             "width": 32, "height": 32, "gid": 0x80000041},
                        ],
                    },
                    {
                        "type": "group",
                        "id": 4,
                        "name": "Inner",
                        "layers": [
                            {"type": "imagelayer", "id": 5, "name": "Sky",
                             "image": "sky.png", "transparentcolor": "#ff00ff"},
                        ],
                    },
                ],
            },
        ],
    )


@pytest.fixture
def write_map(tmp_path):
    """Write a document to a temporary .json file and return its path."""
    def _write(doc, name="map.json"):
        path = tmp_path / name
        path.write_text(json.dumps(doc), encoding="utf-8")
        return path
    return _write
