"""Chi-square and normal-distribution primitives shared by the test battery."""

from __future__ import annotations

from math import exp, isfinite, log, sqrt
from typing import Sequence

import numpy as np
from scipy import stats as sp_stats

from prng_battery.errors import LengthMismatch

# Abramowitz & Stegun 7.1.26, |error| <= 1.5e-7
_ERF_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)
_ERF_P = 0.3275911

# Acklam's rational approximation for the normal quantile
_PPF_A = (-3.969683028665376e+01, 2.209460984245205e+02, -2.759285104469687e+02,
          1.383577518672690e+02, -3.066479806614716e+01, 2.506628277459239e+00)
_PPF_B = (-5.447609879822406e+01, 1.615858368580409e+02, -1.556989798598866e+02,
          6.680131188771972e+01, -1.328068155288572e+01)
_PPF_C = (-7.784894002430293e-03, -3.223964580411365e-01, -2.400758277161838e+00,
          -2.549732539343734e+00, 4.374664141464968e+00, 2.938163982698783e+00)
_PPF_D = (7.784695709041462e-03, 3.224671290700398e-01, 2.445134137142996e+00,
          3.754408661907416e+00)
_PPF_LOW = 0.02425

P_VALUE_METHODS = ("wilson-hilferty", "exact")


def clamp_probability(p: float) -> float:
    """Clamp *p* into [0, 1]; NaN maps to the neutral 1.0."""
    if p != p:
        return 1.0
    return min(1.0, max(0.0, float(p)))


def erf(x: float) -> float:
    """Error function via the Abramowitz–Stegun rational approximation."""
    sign = -1.0 if x < 0 else 1.0
    x = abs(x)
    a1, a2, a3, a4, a5 = _ERF_A
    t = 1.0 / (1.0 + _ERF_P * x)
    poly = ((((a5 * t + a4) * t + a3) * t + a2) * t + a1) * t
    return sign * (1.0 - poly * exp(-x * x))


def norm_cdf(z: float) -> float:
    """Standard normal CDF."""
    return 0.5 * (1.0 + erf(z / sqrt(2.0)))


def norm_ppf(p: float) -> float:
    """Standard normal quantile (inverse CDF).

    Raises ``ValueError`` unless ``0 < p < 1``.
    """
    if not 0.0 < p < 1.0:
        raise ValueError(f"p must be in (0, 1), got {p!r}")
    a, b, c, d = _PPF_A, _PPF_B, _PPF_C, _PPF_D
    if p < _PPF_LOW:
        q = sqrt(-2.0 * log(p))
        return (((((c[0] * q + c[1]) * q + c[2]) * q + c[3]) * q + c[4]) * q + c[5]) / \
            ((((d[0] * q + d[1]) * q + d[2]) * q + d[3]) * q + 1.0)
    if p <= 1.0 - _PPF_LOW:
        q = p - 0.5
        r = q * q
        return (((((a[0] * r + a[1]) * r + a[2]) * r + a[3]) * r + a[4]) * r + a[5]) * q / \
            (((((b[0] * r + b[1]) * r + b[2]) * r + b[3]) * r + b[4]) * r + 1.0)
    q = sqrt(-2.0 * log(1.0 - p))
    return -(((((c[0] * q + c[1]) * q + c[2]) * q + c[3]) * q + c[4]) * q + c[5]) / \
        ((((d[0] * q + d[1]) * q + d[2]) * q + d[3]) * q + 1.0)


def chi_square_statistic(observed: Sequence[float], expected: Sequence[float]) -> float:
    """Pearson's ``Σ (o − e)² / e``; bins with ``e == 0`` contribute nothing."""
    if len(observed) != len(expected):
        raise LengthMismatch(
            f"observed has {len(observed)} bins but expected has {len(expected)}"
        )
    obs = np.asarray(observed, dtype=float)
    exp_ = np.asarray(expected, dtype=float)
    mask = exp_ != 0
    return float(np.sum((obs[mask] - exp_[mask]) ** 2 / exp_[mask]))


def chi_square_p_value(statistic: float, df: int, method: str = "wilson-hilferty") -> float:
    """Upper-tail probability of a chi-square *statistic* with *df* degrees of freedom.

    ``method="wilson-hilferty"`` uses the cube-root normal approximation;
    ``method="exact"`` defers to the regularised incomplete gamma function.
    Both return a value in [0, 1], and ``df == 0`` is always 1.0.
    """
    if method not in P_VALUE_METHODS:
        raise ValueError(f"Unknown p-value method: {method!r}")
    if df < 0:
        raise ValueError(f"Degrees of freedom must be >= 0, got {df}")
    if df == 0:
        return 1.0
    if not isfinite(statistic):
        return 0.0 if statistic > 0 else 1.0
    statistic = max(0.0, float(statistic))
    if method == "exact":
        return clamp_probability(float(sp_stats.chi2.sf(statistic, df)))
    t = (statistic / df) ** (1.0 / 3.0)
    mu = 1.0 - 2.0 / (9.0 * df)
    sigma = sqrt(2.0 / (9.0 * df))
    z = (t - mu) / sigma
    return clamp_probability(1.0 - norm_cdf(z))


def chi_square_quantile(p: float, df: int, method: str = "wilson-hilferty") -> float:
    """The statistic whose lower-tail probability is *p*.

    Inverts Wilson–Hilferty by default; ``method="exact"`` uses the chi-square
    percent-point function.
    """
    if method not in P_VALUE_METHODS:
        raise ValueError(f"Unknown quantile method: {method!r}")
    z = norm_ppf(p)
    if df <= 0:
        return 0.0
    if method == "exact":
        return float(sp_stats.chi2.ppf(p, df))
    t = 1.0 - 2.0 / (9.0 * df) + z * sqrt(2.0 / (9.0 * df))
    return max(0.0, df * t ** 3)


def acceptance_interval(df: int, lower: float = 0.1, upper: float = 0.9,
                        method: str = "wilson-hilferty") -> tuple[float, float]:
    """Critical bounds ``(left, right)`` a chi-square statistic should fall between."""
    if not 0.0 < lower < upper < 1.0:
        raise ValueError("Quantiles must satisfy 0 < lower < upper < 1")
    return chi_square_quantile(lower, df, method), chi_square_quantile(upper, df, method)


def two_sided_normal_p(z: float) -> float:
    """Two-sided p-value for a standard normal score."""
    if not isfinite(z):
        return 0.0 if z == z else 1.0
    return clamp_probability(2.0 * (1.0 - norm_cdf(abs(z))))
