"""stepcalc package: step-by-step numeric engine for number theory, algebra, geometry and trigonometry."""

__all__ = [
    "config",
    "types",
    "primitives",
    "trace",
    "parser",
    "engine",
    "number_theory",
    "algebra",
    "geometry",
    "trigonometry",
    "dispatch",
    "api",
    "formatter",
    "cli",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "compute",
    "gcd_lcm",
    "primality",
    "simplify_root",
    "prime_sieve",
    "set_operation",
    "base_convert",
    "sort_numbers",
    "quadratic",
    "logarithm",
    "exponential",
    "permutation",
    "combination",
    "factorial",
    "linear_inequality",
    "logic_gate",
    "solid",
    "normalize_angle",
    "to_radians",
    "to_degrees",
    "trig_function",
    "pythagorean_identities",
    "double_angle",
    "half_angle",
    "inverse_trig",
    "pythagorean",
    "right_triangle",
    "triangle_sas",
    "triangle_aas",
]
