import pytest

from tiled_json import (
    Color, DecodeError, DrawOrder, FormatError, GroupLayer, ImageLayer, LayerKind,
    ObjectGroup, ObjectShape, Orientation, RenderOrder, TileLayer, deserialize,
)

from conftest import GIDS, encode_gids, map_doc, tile_layer_doc, tileset_doc


# =============================================================================
# TREE STRUCTURE
# =============================================================================

def test_full_map_structure(full_map_doc):
    tiled_map = deserialize(full_map_doc)

    assert (tiled_map.width, tiled_map.height) == (3, 3)
    assert tiled_map.orientation is Orientation.ORTHOGONAL
    assert tiled_map.renderorder is RenderOrder.RIGHT_DOWN
    assert tiled_map.backgroundcolor == Color(0x10, 0x20, 0x30, 0x80)
    assert tiled_map.get_string("weather") == "rain"
    assert [ts.name for ts in tiled_map.tilesets] == ["terrain", "props"]

    ground, decor = tiled_map.layers
    assert isinstance(ground, TileLayer)
    assert ground.compression == "zlib"
    assert ground.data.tolist() == GIDS
    assert isinstance(decor, GroupLayer)
    assert decor.opacity == 0.5


def test_nested_groups_keep_document_order(full_map_doc):
    tiled_map = deserialize(full_map_doc)
    names = [layer.name for layer in tiled_map.iter_layers()]
    assert names == ["Ground", "Decor", "Spawns", "Inner", "Sky"]
    assert [layer.name for layer in tiled_map.all_layers_flat()] == \
        ["Ground", "Spawns", "Sky"]


def test_layer_by_name_searches_groups(full_map_doc):
    tiled_map = deserialize(full_map_doc)
    sky = tiled_map.layer_by_name("Sky")
    assert isinstance(sky, ImageLayer)
    assert sky.kind is LayerKind.IMAGE_LAYER
    assert sky.is_image_layer()
    assert sky.image == "sky.png"
    assert sky.transparentcolor == Color(255, 0, 255)
    assert tiled_map.layer_by_name("missing") is None


def test_object_shapes(full_map_doc):
    spawns = deserialize(full_map_doc).layer_by_name("Spawns")
    assert isinstance(spawns, ObjectGroup)
    assert spawns.draworder is DrawOrder.TOPDOWN

    player, zone, barrel = spawns.objects
    assert player.shape is ObjectShape.POINT
    assert player.type == "spawn"
    assert zone.shape is ObjectShape.POLYGON
    assert [(p.x, p.y) for p in zone.points] == [(0, 0), (32, 0), (32, 32)]
    assert barrel.shape is ObjectShape.TILE
    assert barrel.bare_gid == 0x41
    assert barrel.flags.horizontal
    assert spawns.object_by_name("zone") is zone


def test_text_object():
    tiled_map = deserialize(map_doc(layers=[{
        "type": "objectgroup", "name": "Labels",
        "objects": [{"id": 1, "x": 0, "y": 0, "width": 100, "height": 20,
                     "text": {"text": "Hello", "bold": True, "halign": "center",
                              "color": "#ff0000"}}],
    }]))
    label = tiled_map.layers[0].objects[0]
    assert label.shape is ObjectShape.TEXT
    assert label.text.text == "Hello"
    assert label.text.bold
    assert str(label.text.halign) == "center"
    assert label.text.color == Color(255, 0, 0)


def test_tile_layer_grid_access():
    layer = deserialize(map_doc()).layers[0]
    assert layer.gid_at(1, 0) == 2
    assert layer.gid_at(1, 1) == 0x80000005
    assert layer.gid_at(3, 0) == 0
    assert layer.grid()[2, 2] == 200
    assert layer.grid().shape == (3, 3)


def test_enum_display_strings(full_map_doc):
    tiled_map = deserialize(full_map_doc)
    assert str(tiled_map.orientation) == "orthogonal"
    assert str(tiled_map.renderorder) == "right-down"
    assert str(tiled_map.layers[0].kind) == "tilelayer"
    assert str(Color(0x10, 0x20, 0x30, 0x80)) == "#80102030"


def test_layer_defaults():
    layer = deserialize(map_doc(layers=[
        {"type": "tilelayer", "width": 3, "height": 3, "data": GIDS},
    ])).layers[0]
    assert layer.name == ""
    assert layer.id is None
    assert layer.opacity == 1.0
    assert layer.visible
    assert layer.parallaxx == 1.0


# =============================================================================
# FAILURES
# =============================================================================

def test_infinite_map_rejected():
    with pytest.raises(FormatError) as info:
        deserialize(map_doc(infinite=True))
    assert info.value.field == "infinite"


def test_wangsets_rejected():
    doc = map_doc(tilesets=[tileset_doc(wangsets=[{"name": "paths"}])])
    with pytest.raises(FormatError) as info:
        deserialize(doc)
    assert info.value.field == "wangsets"
    assert "terrain" in info.value.where


def test_chunks_rejected_in_nested_layer():
    chunked = {"type": "tilelayer", "name": "Chunky", "width": 3, "height": 3,
               "chunks": [{"x": 0, "y": 0, "width": 16, "height": 16, "data": []}]}
    doc = map_doc(layers=[{"type": "group", "name": "G", "layers": [chunked]}])
    with pytest.raises(FormatError) as info:
        deserialize(doc)
    assert info.value.field == "chunks"
    assert "Chunky" in str(info.value)


def test_terrains_rejected():
    with pytest.raises(FormatError):
        deserialize(map_doc(tilesets=[tileset_doc(terrains=[{"name": "grass", "tile": 0}])]))


def test_external_tileset_rejected():
    with pytest.raises(FormatError) as info:
        deserialize(map_doc(tilesets=[{"firstgid": 1, "source": "terrain.tsj"}]))
    assert info.value.field == "source"


def test_object_template_rejected():
    doc = map_doc(layers=[{"type": "objectgroup", "name": "Objs", "objects": [
        {"id": 7, "template": "tree.tj", "x": 0, "y": 0},
    ]}])
    with pytest.raises(FormatError) as info:
        deserialize(doc)
    assert info.value.field == "template"
    assert "object 7" in info.value.where


def test_missing_required_field():
    doc = map_doc()
    del doc["tilewidth"]
    with pytest.raises(FormatError) as info:
        deserialize(doc)
    assert info.value.field == "tilewidth"
    assert info.value.reason == "is required"


def test_mistyped_field():
    with pytest.raises(FormatError, match="must be an integer"):
        deserialize(map_doc(width="3"))


def test_unknown_layer_type():
    with pytest.raises(FormatError, match="unknown value 'weird'"):
        deserialize(map_doc(layers=[{"type": "weird", "name": "X"}]))


def test_unknown_orientation():
    with pytest.raises(FormatError) as info:
        deserialize(map_doc(orientation="spherical"))
    assert info.value.field == "orientation"


def test_tile_layer_wrong_length():
    with pytest.raises(FormatError):
        deserialize(map_doc(layers=[tile_layer_doc([1, 2], 3, 3)]))


def test_tile_layer_negative_gid():
    with pytest.raises(FormatError):
        deserialize(map_doc(layers=[tile_layer_doc([-1] * 9, 3, 3)]))


def test_decode_error_names_the_layer():
    layer = tile_layer_doc(GIDS, 3, 3, name="Broken", encoding="base64",
                           compression="zlib")
    layer["data"] = encode_gids(GIDS)              # not actually compressed
    with pytest.raises(DecodeError) as info:
        deserialize(map_doc(layers=[layer]))
    assert info.value.layer == "Broken"
    assert "Broken" in str(info.value)


def test_corrupted_base64_length():
    layer = tile_layer_doc(GIDS[:4], 3, 3, name="Short", encoding="base64")
    with pytest.raises(DecodeError) as info:
        deserialize(map_doc(layers=[layer]))
    assert info.value.layer == "Short"


def test_root_must_be_object():
    with pytest.raises(FormatError):
        deserialize([1, 2, 3])


# =============================================================================
# UNSUPPORTED FEATURES, EVERY LEVEL
# =============================================================================

def _with_layer(layer):
    return map_doc(layers=[layer])


def _with_tileset(**extra):
    return map_doc(tilesets=[tileset_doc(**extra)])


def _with_object(**extra):
    obj = {"id": 3, "x": 0, "y": 0}
    obj.update(extra)
    return _with_layer({"type": "objectgroup", "name": "Objs", "objects": [obj]})


@pytest.mark.parametrize("doc,field", [
    (map_doc(infinite=True), "infinite"),
    (_with_tileset(source="terrain.tsj"), "source"),
    (_with_tileset(wangsets=[]), "wangsets"),
    (_with_tileset(terrains=[]), "terrains"),
    (_with_tileset(tiles=[{"id": 0, "terrain": [0, 0, 0, 0]}]), "terrain"),
    (_with_tileset(tiles=[{"id": 0, "objectgroup": {
        "type": "objectgroup", "objects": [], "chunks": []}}]), "chunks"),
    (_with_layer(tile_layer_doc(GIDS, 3, 3, chunks=[])), "chunks"),
    (_with_layer({"type": "objectgroup", "name": "O", "objects": [], "chunks": []}),
     "chunks"),
    (_with_layer({"type": "imagelayer", "name": "I", "image": "a.png", "chunks": []}),
     "chunks"),
    (_with_layer({"type": "group", "name": "G", "layers": [], "chunks": []}), "chunks"),
    (_with_object(template="tree.tj"), "template"),
], ids=[
    "map-infinite", "tileset-source", "tileset-wangsets", "tileset-terrains",
    "tile-terrain", "tile-collision-chunks", "tilelayer-chunks",
    "objectgroup-chunks", "imagelayer-chunks", "group-chunks", "object-template",
])
def test_unsupported_feature_rejected(doc, field):
    with pytest.raises(FormatError) as info:
        deserialize(doc)
    assert info.value.field == field
    assert "not supported" in info.value.reason


# =============================================================================
# OBJECT SHAPES
# =============================================================================

SHAPE_CASES = [
    ({}, ObjectShape.RECTANGLE),
    ({"ellipse": True}, ObjectShape.ELLIPSE),
    ({"point": True}, ObjectShape.POINT),
    ({"polygon": [{"x": 0, "y": 0}, {"x": 8, "y": 0}, {"x": 8, "y": 8}]},
     ObjectShape.POLYGON),
    ({"polyline": [{"x": 0, "y": 0}, {"x": 8, "y": 8}]}, ObjectShape.POLYLINE),
    ({"gid": 3}, ObjectShape.TILE),
    ({"text": {"text": "hi"}}, ObjectShape.TEXT),
    # gid wins over every other marker
    ({"gid": 3, "ellipse": True}, ObjectShape.TILE),
]


@pytest.mark.parametrize("extra,shape", SHAPE_CASES)
def test_shape_discrimination(extra, shape):
    obj = deserialize(_with_object(**extra)).layers[0].objects[0]
    assert obj.shape is shape


def test_shape_cases_cover_every_member():
    assert {shape for _, shape in SHAPE_CASES} == set(ObjectShape)


def test_polyline_points():
    obj = deserialize(_with_object(
        polyline=[{"x": 0, "y": 0}, {"x": 8, "y": 4}])).layers[0].objects[0]
    assert [(p.x, p.y) for p in obj.points] == [(0, 0), (8, 4)]


@pytest.mark.parametrize("key", ["polygon", "polyline"])
def test_empty_point_list_rejected(key):
    with pytest.raises(FormatError) as info:
        deserialize(_with_object(**{key: []}))
    assert info.value.field == key


@pytest.mark.parametrize("gid", [-1, 0x100000000])
def test_tile_object_gid_out_of_range(gid):
    with pytest.raises(FormatError) as info:
        deserialize(_with_object(gid=gid))
    assert info.value.field == "gid"


def test_tile_object_with_all_flags():
    obj = deserialize(_with_object(gid=0xE0000007)).layers[0].objects[0]
    assert obj.bare_gid == 7
    assert tuple(obj.flags) == (True, True, True)
