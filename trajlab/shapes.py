"""
Drag Shape Presets
==================
Constant drag coefficients for common body shapes at subsonic Reynolds
numbers, plus parsing of user-supplied custom coefficients.

Values from:
- Hoerner, "Fluid Dynamic Drag" (1965)
- NASA Glenn "Shape Effects on Drag" reference sheet
"""

import math

from .errors import ValidationError


SPHERE_DATA = {
    'name': 'Sphere',
    'cd': 0.47,
    'color': '#3498db',
}

HALF_SPHERE_DATA = {
    'name': 'Half Sphere',
    'cd': 0.42,
    'color': '#1abc9c',
}

CONE_DATA = {
    'name': 'Cone',
    'cd': 0.50,
    'color': '#2ecc71',
}

CUBE_DATA = {
    'name': 'Cube',
    'cd': 1.05,
    'color': '#e74c3c',
}

ANGLED_CUBE_DATA = {
    'name': 'Angled Cube',
    'cd': 0.80,
    'color': '#e67e22',
}

LONG_CYLINDER_DATA = {
    'name': 'Long Cylinder',
    'cd': 0.82,
    'color': '#9b59b6',
}

SHORT_CYLINDER_DATA = {
    'name': 'Short Cylinder',
    'cd': 1.15,
    'color': '#c0392b',
}

STREAMLINED_DATA = {
    'name': 'Streamlined Body',
    'cd': 0.04,
    'color': '#f39c12',
}

ALL_SHAPES = {
    'sphere': SPHERE_DATA,
    'half_sphere': HALF_SPHERE_DATA,
    'cone': CONE_DATA,
    'cube': CUBE_DATA,
    'angled_cube': ANGLED_CUBE_DATA,
    'long_cylinder': LONG_CYLINDER_DATA,
    'short_cylinder': SHORT_CYLINDER_DATA,
    'streamlined': STREAMLINED_DATA,
}


def shape_cd(shape_key: str) -> float:
    """Drag coefficient of a preset shape."""
    if shape_key not in ALL_SHAPES:
        raise ValueError(
            f"Unknown shape '{shape_key}'. "
            f"Available: {list(ALL_SHAPES.keys())}"
        )
    return ALL_SHAPES[shape_key]['cd']


def parse_drag_coefficient(text) -> float:
    """
    Validate a custom drag coefficient entered as free text.

    The value must parse as a finite, strictly positive number.
    """
    if text is None or not str(text).strip():
        raise ValidationError('cd', text, 'no drag coefficient entered')
    try:
        cd = float(str(text).strip())
    except ValueError:
        raise ValidationError('cd', text, 'not a number') from None
    if not math.isfinite(cd) or cd <= 0.0:
        raise ValidationError('cd', text, 'must be a finite positive number')
    return cd
