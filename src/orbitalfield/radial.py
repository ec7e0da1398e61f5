r"""径向分布曲线
================

径向概率密度

.. math::
    P(r) = r^2 R_{n\ell}(r)^2,\qquad \int_0^\infty P(r)\,dr = 1

直接由 :func:`~orbitalfield.orbitals.radial_wave_function` 采样，与三维场无关，
可与场采样并行计算。输出供外部二维图表使用。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .constants import BOHR_TO_ANGSTROM
from .grid import radial_grid_linear
from .orbitals import radial_wave_function
from .state import QuantumState
from .utils import trapz

__all__ = [
    "RadialCurve",
    "default_radial_extent",
    "radial_probability_curve",
    "radial_normalization",
]


@dataclass(frozen=True, eq=False)
class RadialCurve:
    r"""径向分布采样 :math:`(r_i, P(r_i))`。

    Attributes
    ----------
    n, l : int
        量子数。
    r : numpy.ndarray
        半径（单位见 ``unit``）。
    probability : numpy.ndarray
        :math:`P(r) = r^2 R^2`，为每单位长度（``unit``）的概率，
        因此 :math:`\int P\,dr` 在两种单位下均趋于 1。
    unit : {"bohr", "angstrom"}
        长度单位。
    """

    n: int
    l: int
    r: np.ndarray
    probability: np.ndarray
    unit: str = "bohr"

    def __len__(self) -> int:
        return int(self.r.size)

    def __iter__(self):
        return iter(zip(self.r.tolist(), self.probability.tolist()))

    def peak_radius(self) -> float:
        """概率最大处的半径（与 ``r`` 同单位）。"""
        return float(self.r[int(np.argmax(self.probability))])


def default_radial_extent(n: int) -> float:
    """默认曲线范围 :math:`5 n^2` Bohr。"""
    return 5.0 * n * n


def radial_probability_curve(
    n: int,
    l: int,
    num: int = 101,
    r_max: float | None = None,
    unit: str = "bohr",
) -> RadialCurve:
    """在线性网格 ``[0, r_max]`` 上采样径向概率密度。

    Parameters
    ----------
    n, l : int
        量子数（越界时抛出 :class:`~orbitalfield.state.InvalidQuantumState`）。
    num : int, optional
        采样点数（含端点），默认 101。
    r_max : float, optional
        最大半径（Bohr），默认 :func:`default_radial_extent`。
    unit : {"bohr", "angstrom"}
        输出长度单位。取 ``"angstrom"`` 时半径乘以 0.529177，
        概率密度相应除以同一因子（每 Å 的概率）。
    """
    QuantumState(n, l, 0).validate()
    if unit not in ("bohr", "angstrom"):
        raise ValueError(f"未知长度单位: {unit!r}")
    if r_max is None:
        r_max = default_radial_extent(n)
    r, _ = radial_grid_linear(num, 0.0, r_max)
    radial = radial_wave_function(n, l, r)
    prob = r * r * radial * radial
    if unit == "angstrom":
        r = r * BOHR_TO_ANGSTROM
        prob = prob / BOHR_TO_ANGSTROM
    return RadialCurve(n=n, l=l, r=r, probability=prob, unit=unit)


def radial_normalization(n: int, l: int, r_max: float | None = None, num: int = 2001) -> float:
    r"""数值积分 :math:`\int_0^{r_\max} r^2 R_{n\ell}^2\,dr`，随 :math:`r_\max` 增大趋于 1。"""
    if r_max is None:
        r_max = 4.0 * default_radial_extent(n)
    r, w = radial_grid_linear(num, 0.0, r_max)
    radial = radial_wave_function(n, l, r)
    return trapz(r * r * radial * radial, r, w)
