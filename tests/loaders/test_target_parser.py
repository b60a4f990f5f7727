"""Tests for .target morph file parsing."""

import logging

import numpy as np

from meshforge.core.mesh import Mesh
from meshforge.loaders.target_parser import load_target_file, parse_target
from meshforge.ops.morph import apply_morph

SAMPLE = """\
# smile target
# index dx dy dz
0 0.0 0.0 1.0
2 0.5 -0.25 0.0

5 1 2 3
"""


def test_parse_entries_in_file_order():
    morph = parse_target(SAMPLE, "smile")
    assert morph.name == "smile"
    np.testing.assert_array_equal(morph.indices, [0, 2, 5])
    np.testing.assert_array_almost_equal(
        morph.deltas, [[0, 0, 1], [0.5, -0.25, 0], [1, 2, 3]],
    )


def test_malformed_lines_skipped(caplog):
    text = "0 1 2 3\n1 2 3\nx 1 2 3\n2 a b c\n-1 0 0 0\n3 0 0 1 extra\n"
    with caplog.at_level(logging.WARNING, logger="meshforge.loaders.target_parser"):
        morph = parse_target(text, "t")
    np.testing.assert_array_equal(morph.indices, [0, 3])
    assert "skipped 4 malformed lines" in caplog.text


def test_empty_text():
    morph = parse_target("# nothing here\n", "empty")
    assert morph.indices.shape == (0,)
    assert morph.deltas.shape == (0, 3)


def test_load_file_name_defaults_to_stem(tmp_path):
    path = tmp_path / "brow-raise.target"
    path.write_text(SAMPLE)
    morph = load_target_file(path)
    assert morph.name == "brow-raise"
    assert len(morph.indices) == 3
    assert load_target_file(str(path), name="custom").name == "custom"


def test_loaded_target_drives_mesh(tmp_path):
    path = tmp_path / "smile.target"
    path.write_text(SAMPLE)
    mesh = Mesh(verts=np.zeros((6, 3)), morphs=[load_target_file(path)])
    mesh.validate()
    out = apply_morph(mesh, "smile", 2.0)
    np.testing.assert_array_almost_equal(out[0], [0, 0, 2])
    np.testing.assert_array_almost_equal(out[2], [1, -0.5, 0])
    np.testing.assert_array_almost_equal(out[5], [2, 4, 6])
    np.testing.assert_array_equal(out[[1, 3, 4]], 0)
