import numpy as np

from nestform.models import Curve, DesignState
from nestform.pipeline import recompute
from nestform.geom.spline import build_spline
from nestform.export.svg import path_to_svg_d, export_svg, save_svg


def _diamond_curve():
    return build_spline(np.array([[2.0, 5.0], [5.0, 2.0], [8.0, 5.0], [5.0, 8.0]]))


def test_path_data_format():
    d = path_to_svg_d(_diamond_curve())
    assert d.startswith("M 2.0000 5.0000 C 2.0000 4.0000, 4.0000 2.0000, 5.0000 2.0000 C ")
    assert d.endswith(" Z")
    assert d.count("C ") == 4


def test_negative_zero_is_normalized():
    ctrl = np.array([[[-0.0, -1e-9], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]])
    d = path_to_svg_d(Curve(control=ctrl))
    assert d.startswith("M 0.0000 0.0000 ")
    assert "-0.0000" not in d


def test_empty_curve_path():
    assert path_to_svg_d(Curve()) == ""


def test_document_size_and_paths():
    nests = recompute(DesignState(), with_layers=False).nests
    doc = export_svg(nests)
    assert 'width="7.0000in"' in doc
    assert 'height="7.0000in"' in doc
    assert 'viewBox="1.5000 1.5000 7.0000 7.0000"' in doc
    assert doc.count("<path ") == len(nests) == 19
    assert "fill: none" in doc


def test_document_padding():
    doc = export_svg([_diamond_curve()], padding=1.0)
    assert 'viewBox="1.0000 1.0000 8.0000 8.0000"' in doc


def test_empty_document():
    doc = export_svg([Curve()])
    assert 'viewBox="-0.5000 -0.5000 1.0000 1.0000"' in doc
    assert "<path " not in doc


def test_save_svg(tmp_path):
    out = tmp_path / "nested" / "out.svg"
    save_svg([_diamond_curve()], out)
    text = out.read_text(encoding="utf-8")
    assert text.startswith("<?xml")
    assert text.rstrip().endswith("</svg>")
