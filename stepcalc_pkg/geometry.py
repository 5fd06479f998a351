"""Volume and surface area of common solids.

A single ``calculate`` operation serves every solid: the ``shape`` input
selects a descriptor from :data:`SHAPES`, which names the dimensions that
shape needs and the function that derives its measures. Dimensions must be
strictly positive; a non-positive one is reported as a domain error after a
validation step is written to the trace.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Mapping, NamedTuple

from .engine import operation
from .parser import parse_real, sanitize
from .trace import TraceBuilder
from .types import Domain, MathDomainError, SolidMeasures, ValidationError


class ShapeDescriptor(NamedTuple):
    name: str
    params: tuple[str, ...]
    description: str
    solve: Callable[[dict[str, float], TraceBuilder], SolidMeasures]
    exact: bool = False  # no π or square roots involved


def _cone(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    r, h = d["r"], d["h"]
    slant = math.sqrt(r * r + h * h)
    trace.add("Slant height from the Pythagorean theorem.", formula="l = √(r² + h²)", values=d,
              partial_result=slant)
    volume = math.pi * r * r * h / 3
    trace.add("Volume.", formula="V = ⅓·π·r²·h", values=d, partial_result=volume)
    lateral = math.pi * r * slant
    trace.add("Lateral surface area.", formula="L = π·r·l", values={"r": r, "l": slant},
              partial_result=lateral)
    total = math.pi * r * (r + slant)
    trace.add("Total surface area adds the base disc.", formula="A = π·r·(r + l)",
              values={"r": r, "l": slant}, partial_result=total)
    return SolidMeasures(volume, lateral, total, slant)


def _cylinder(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    r, h = d["r"], d["h"]
    volume = math.pi * r * r * h
    trace.add("Volume is base area times height.", formula="V = π·r²·h", values=d,
              partial_result=volume)
    lateral = 2 * math.pi * r * h
    trace.add("Lateral surface area.", formula="L = 2·π·r·h", values=d, partial_result=lateral)
    total = 2 * math.pi * r * (r + h)
    trace.add("Total surface area adds both end discs.", formula="A = 2·π·r·(r + h)", values=d,
              partial_result=total)
    return SolidMeasures(volume, lateral, total)


def _sphere(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    r = d["r"]
    volume = 4 / 3 * math.pi * r * r * r
    trace.add("Volume.", formula="V = 4/3·π·r³", values=d, partial_result=volume)
    total = 4 * math.pi * r * r
    trace.add("Surface area; a sphere has no separate lateral surface.", formula="A = 4·π·r²",
              values=d, partial_result=total)
    return SolidMeasures(volume, total, total)


def _cube(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    a = d["a"]
    volume = a * a * a
    trace.add("Volume.", formula="V = a³", values=d, partial_result=volume)
    lateral = 4 * a * a
    trace.add("Lateral surface area covers the four side faces.", formula="L = 4·a²", values=d,
              partial_result=lateral)
    total = 6 * a * a
    trace.add("Total surface area covers all six faces.", formula="A = 6·a²", values=d,
              partial_result=total)
    return SolidMeasures(volume, lateral, total)


def _pyramid(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    b, h = d["b"], d["h"]
    slant = math.sqrt(h * h + b * b / 4)
    trace.add("Slant height of a triangular face.", formula="l = √(h² + (b/2)²)", values=d,
              partial_result=slant)
    volume = b * b * h / 3
    trace.add("Volume.", formula="V = ⅓·b²·h", values=d, partial_result=volume)
    lateral = 2 * b * slant
    trace.add("Lateral surface area of the four triangular faces.", formula="L = 2·b·l",
              values={"b": b, "l": slant}, partial_result=lateral)
    total = b * b + lateral
    trace.add("Total surface area adds the square base.", formula="A = b² + L",
              values={"b": b, "L": lateral}, partial_result=total)
    return SolidMeasures(volume, lateral, total, slant)


def _rectangular_prism(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    w, depth, h = d["w"], d["d"], d["h"]
    volume = w * depth * h
    trace.add("Volume.", formula="V = w·d·h", values=d, partial_result=volume)
    lateral = 2 * (w * h + depth * h)
    trace.add("Lateral surface area of the four side faces.", formula="L = 2·(w·h + d·h)",
              values=d, partial_result=lateral)
    total = 2 * (w * depth + w * h + depth * h)
    trace.add("Total surface area adds top and bottom.", formula="A = 2·(w·d + w·h + d·h)",
              values=d, partial_result=total)
    return SolidMeasures(volume, lateral, total)


def _torus(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    big, small = d["R"], d["r"]
    if big <= small:
        trace.add(f"The major radius R = {trace.show(big)} must exceed the minor radius "
                  f"r = {trace.show(small)}.")
        raise MathDomainError(
            "Torus major radius R must be greater than minor radius r", "TORUS_RADII"
        )
    volume = 2 * math.pi**2 * big * small * small
    trace.add("Volume.", formula="V = 2·π²·R·r²", values=d, partial_result=volume)
    total = 4 * math.pi**2 * big * small
    trace.add("Surface area; the whole surface of a torus is lateral.", formula="A = 4·π²·R·r",
              values=d, partial_result=total)
    return SolidMeasures(volume, total, total)


def _hemisphere(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    r = d["r"]
    volume = 2 / 3 * math.pi * r * r * r
    trace.add("Volume is half that of the sphere.", formula="V = 2/3·π·r³", values=d,
              partial_result=volume)
    lateral = 2 * math.pi * r * r
    trace.add("Curved surface area.", formula="L = 2·π·r²", values=d, partial_result=lateral)
    total = 3 * math.pi * r * r
    trace.add("Total surface area adds the flat disc.", formula="A = 3·π·r²", values=d,
              partial_result=total)
    return SolidMeasures(volume, lateral, total)


def _frustum(d: dict[str, float], trace: TraceBuilder) -> SolidMeasures:
    big, small = max(d["r1"], d["r2"]), min(d["r1"], d["r2"])
    h = d["h"]
    if d["r1"] < d["r2"]:
        trace.add("The radii were given smaller first; use R as the larger and r as the smaller.")
    v = {"R": big, "r": small, "h": h}
    slant = math.sqrt((big - small) * (big - small) + h * h)
    trace.add("Slant height.", formula="l = √((R − r)² + h²)", values=v, partial_result=slant)
    volume = math.pi * h * (big * big + small * small + big * small) / 3
    trace.add("Volume.", formula="V = ⅓·π·h·(R² + r² + R·r)", values=v, partial_result=volume)
    lateral = math.pi * (big + small) * slant
    trace.add("Lateral surface area.", formula="L = π·(R + r)·l",
              values={"R": big, "r": small, "l": slant}, partial_result=lateral)
    total = lateral + math.pi * big * big + math.pi * small * small
    trace.add("Total surface area adds both discs.", formula="A = L + π·R² + π·r²",
              values={"L": lateral, "R": big, "r": small}, partial_result=total)
    return SolidMeasures(volume, lateral, total, slant)


SHAPES: dict[str, ShapeDescriptor] = {
    s.name: s
    for s in (
        ShapeDescriptor("cone", ("r", "h"), "right circular cone", _cone),
        ShapeDescriptor("cylinder", ("r", "h"), "right circular cylinder", _cylinder),
        ShapeDescriptor("sphere", ("r",), "sphere", _sphere),
        ShapeDescriptor("cube", ("a",), "cube", _cube, exact=True),
        ShapeDescriptor("pyramid", ("b", "h"), "square pyramid", _pyramid),
        ShapeDescriptor("rectangular-prism", ("w", "d", "h"), "rectangular prism",
                        _rectangular_prism, exact=True),
        ShapeDescriptor("torus", ("R", "r"), "torus (R major, r minor radius)", _torus),
        ShapeDescriptor("hemisphere", ("r",), "solid hemisphere", _hemisphere),
        ShapeDescriptor("frustum", ("r1", "r2", "h"), "conical frustum", _frustum),
    )
}


def shapes() -> dict[str, tuple[str, ...]]:
    """Shape name -> required dimension names."""
    return {name: descriptor.params for name, descriptor in SHAPES.items()}


def _resolve_shape(raw: Any) -> ShapeDescriptor:
    key = sanitize(str(raw), "shape").lower().replace("_", "-").replace(" ", "-")
    try:
        return SHAPES[key]
    except KeyError:
        raise ValidationError(
            f"Unknown shape {raw!r}; expected one of {', '.join(SHAPES)}", "UNKNOWN_SHAPE"
        ) from None


@operation(Domain.GEOMETRY, "calculate", required=("shape",), strict=False)
def calculate(inputs: Mapping[str, Any], trace: TraceBuilder) -> SolidMeasures:
    """Volume, lateral and total surface area of a solid."""
    descriptor = _resolve_shape(inputs["shape"])
    given = {k: v for k, v in inputs.items() if k != "shape"}
    missing = [
        p for p in descriptor.params
        if given.get(p) is None or (isinstance(given[p], str) and not given[p].strip())
    ]
    if missing:
        raise ValidationError(
            f"A {descriptor.name} needs: {', '.join(descriptor.params)}; missing "
            f"{', '.join(missing)}",
            "MISSING_PARAMETER",
        )
    unexpected = sorted(k for k in given if k not in descriptor.params)
    if unexpected:
        raise ValidationError(
            f"Unexpected parameter(s) for {descriptor.name}: {', '.join(unexpected)}",
            "UNEXPECTED_PARAMETER",
        )
    dims = {p: parse_real(given[p], p) for p in descriptor.params}

    bad = [p for p, value in dims.items() if value <= 0]
    if bad:
        trace.add(
            "Validate dimensions: "
            + ", ".join(f"{p} = {trace.show(dims[p])}" for p in bad)
            + " must be strictly positive."
        )
        raise MathDomainError(
            f"Dimensions of a {descriptor.name} must be positive: {', '.join(bad)}",
            "NON_POSITIVE_DIMENSION",
        )

    trace.add(
        f"Shape: {descriptor.description} with "
        + ", ".join(f"{p} = {trace.show(dims[p])}" for p in descriptor.params)
        + "."
    )
    if not descriptor.exact:
        trace.note_rounding()
    measures = descriptor.solve(dims, trace)
    if not all(math.isfinite(m) for m in measures if m is not None):
        trace.add("The measures exceed the floating-point range.")
        raise ValidationError(
            f"Dimensions of the {descriptor.name} are too large to evaluate numerically",
            "TOO_LARGE",
        )
    trace.add(
        f"Volume {trace.show(measures.volume)}, lateral surface area "
        f"{trace.show(measures.lateral_surface_area)}, total surface area "
        f"{trace.show(measures.total_surface_area)}.",
        partial_result=measures,
    )
    return measures
