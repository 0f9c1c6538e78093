"""
Tests for orbital display helpers.
"""

from orbital_sim.labels import (
    DEFAULT_COLOR,
    orbital_color,
    orbital_formula,
    orbital_letter,
    orbital_name,
)


def test_letters():
    assert [orbital_letter(l) for l in range(6)] == ["s", "p", "d", "f", "g", "h"]
    assert orbital_letter(6) == "l=6"
    assert orbital_letter(9) == "l=9"


def test_names():
    assert orbital_name(1, 0, 0) == "1s"
    assert orbital_name(2, 1, -1) == "2p(m=-1)"
    assert orbital_name(7, 6, 0) == "7,l=6(m=0)"


def test_colors():
    assert orbital_color(0, 0) == "#3498db"
    assert orbital_color(1, -1) == "#e74c3c"
    assert orbital_color(1, 0) == "#2ecc71"
    assert orbital_color(1, 1) == "#f39c12"
    assert orbital_color(2, 2) == "#2980b9"
    assert orbital_color(3, -3) == "#8e44ad"


def test_colors_fall_back_to_default():
    assert orbital_color(4, 0) == DEFAULT_COLOR
    assert orbital_color(1, 5) == DEFAULT_COLOR
    assert orbital_color(-1, 0) == DEFAULT_COLOR


def test_formula():
    assert orbital_formula(2, 1, 0) == (
        "\\psi_{2p}(r,\\theta,\\phi) = R_{21}(r) \\cdot Y_{1}^{0}(\\theta,\\phi)"
    )
    assert orbital_formula(1, 0, 0).startswith("\\psi_{1s}")
    assert "Y_{3}^{-2}" in orbital_formula(4, 3, -2)
    assert orbital_formula(7, 6, 1).startswith("\\psi_{7,l=6}")
