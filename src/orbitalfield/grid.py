r"""网格工具
============

- 径向线性网格与梯形积分权重（用于径向分布曲线与归一化积分）
- 三维立方采样网格的坐标轴与空间范围启发式
"""

from __future__ import annotations

import numpy as np

from .constants import RANGE_OFFSET, RANGE_SLOPE

__all__ = [
    "trapezoid_weights",
    "radial_grid_linear",
    "spatial_range",
    "cube_axis",
]


def trapezoid_weights(r: np.ndarray) -> np.ndarray:
    r"""为给定单调递增的径向网格计算梯形积分权重。

    .. math::
        \int_{r_\min}^{r_\max} f(r)\,\mathrm{d}r \approx \sum_{i=0}^{N-1} w_i f(r_i)

    端点权重为半步长，内部点为左右间距的平均值。

    Parameters
    ----------
    r : numpy.ndarray
        单调递增的一维坐标数组。

    Returns
    -------
    w : numpy.ndarray
        梯形积分权重。
    """
    if r.ndim != 1:
        raise ValueError("r 必须是一维数组")
    if np.any(np.diff(r) <= 0):
        raise ValueError("r 必须严格单调递增")
    n = r.size
    w = np.empty_like(r, dtype=float)
    if n == 1:
        w[0] = 0.0
        return w
    dr = np.diff(r)
    w[0] = 0.5 * dr[0]
    w[1:-1] = 0.5 * (dr[1:] + dr[:-1])
    w[-1] = 0.5 * dr[-1]
    return w


def radial_grid_linear(n: int, rmin: float, rmax: float) -> tuple[np.ndarray, np.ndarray]:
    r"""生成线性（等间隔）径向网格及其梯形积分权重。

    .. math::
        r_i = r_\min + i\,\Delta r,\quad \Delta r = \frac{r_\max - r_\min}{N-1}

    Examples
    --------
    >>> r, w = radial_grid_linear(5, 0.0, 1.0)
    >>> np.allclose(np.sum(w), 1.0)
    True
    """
    if n < 2:
        raise ValueError("n 必须 >= 2")
    if rmax <= rmin:
        raise ValueError("要求 rmax > rmin")
    r = np.linspace(rmin, rmax, n)
    w = trapezoid_weights(r)
    return r, w


def spatial_range(n: int) -> float:
    r"""采样立方体的物理半宽（Bohr）：:math:`12n + 5`。

    波函数空间尺度约随 :math:`n^2` 增长；固定范围会使高 :math:`n` 轨道
    在固定视野下塌缩为一个亮点或被截断，因此范围随 :math:`n` 线性放大。
    """
    if n < 1:
        raise ValueError(f"要求 n >= 1，实际 n={n}")
    return RANGE_SLOPE * n + RANGE_OFFSET


def cube_axis(size: int, extent: float) -> np.ndarray:
    r"""立方网格单轴的物理坐标。

    .. math::
        x_i = \left(\frac{i}{N-1} - \frac12\right) \cdot 2 \cdot \mathrm{extent},\quad i = 0..N-1

    分母取 :math:`N-1`：首末网格点恰好落在 :math:`\mp\mathrm{extent}`，无半体素偏移。
    """
    if size < 2:
        raise ValueError("size 必须 >= 2")
    i = np.arange(size, dtype=float)
    return ((i / (size - 1)) - 0.5) * 2.0 * extent
