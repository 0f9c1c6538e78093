"""Display helpers: orbital letters, colours and LaTeX formulas."""

from __future__ import annotations

ORBITAL_LETTERS = ("s", "p", "d", "f", "g", "h")

DEFAULT_COLOR = "#7f8c8d"

# Keyed by l, then m. s orbitals share one colour.
ORBITAL_COLORS = {
    0: {0: "#3498db"},
    1: {
        -1: "#e74c3c",  # p_x
        0: "#2ecc71",
        1: "#f39c12",  # p_y
    },
    2: {
        -2: "#9b59b6",
        -1: "#1abc9c",
        0: "#e67e22",
        1: "#34495e",
        2: "#2980b9",
    },
    3: {
        -3: "#8e44ad",
        -2: "#16a085",
        -1: "#d35400",
        0: "#2c3e50",
        1: "#c0392b",
        2: "#27ae60",
        3: "#f1c40f",
    },
}


def orbital_letter(l: int) -> str:
    """Spectroscopic letter for l (s, p, d, f, g, h), else ``"l=<l>"``."""
    if 0 <= l < len(ORBITAL_LETTERS):
        return ORBITAL_LETTERS[l]
    return f"l={l}"


def orbital_name(n: int, l: int, m: int) -> str:
    """Short label such as ``"1s"``, ``"2p(m=-1)"``; used in plot titles and logs."""
    letter = orbital_letter(l)
    base = f"{n}{letter}" if len(letter) == 1 else f"{n},{letter}"
    if l == 0:
        return base
    return f"{base}(m={m})"


def orbital_color(l: int, m: int) -> str:
    """Hex colour for the (l, m) channel; grey for anything not in the table."""
    return ORBITAL_COLORS.get(l, {}).get(m, DEFAULT_COLOR)


def orbital_formula(n: int, l: int, m: int) -> str:
    """LaTeX source for psi_nlm = R_nl(r) Y_l^m(theta, phi)."""
    letter = orbital_letter(l)
    label = f"{n}{letter}" if len(letter) == 1 else f"{n},{letter}"
    return (
        f"\\psi_{{{label}}}(r,\\theta,\\phi) = "
        f"R_{{{n}{l}}}(r) \\cdot Y_{{{l}}}^{{{m}}}(\\theta,\\phi)"
    )


__all__ = [
    "orbital_letter",
    "orbital_name",
    "orbital_color",
    "orbital_formula",
]
