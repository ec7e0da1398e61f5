from __future__ import annotations

import numpy as np

from .constants import SPHERICAL_EPS

__all__ = [
    "trapz",
    "cartesian_to_spherical",
]


def trapz(y: np.ndarray, r: np.ndarray, w: np.ndarray | None = None) -> float:
    r"""使用梯形权重对函数进行一维数值积分。

    若提供 :data:`w`，则直接返回 :math:`\sum_i w_i y_i`；否则按相邻节点
    逐段求和 :math:`\sum_i \tfrac12 (y_i + y_{i+1})(r_{i+1} - r_i)`，
    适用于非均匀网格。
    """
    if w is not None:
        if w.shape != y.shape:
            raise ValueError("w 与 y 的形状必须一致")
        return float(np.sum(w * y))
    dr = np.diff(r)
    return float(np.sum(0.5 * (y[1:] + y[:-1]) * dr))


def cartesian_to_spherical(x, y, z, eps: float = SPHERICAL_EPS):
    r"""笛卡尔坐标转球坐标 :math:`(r, \theta, \varphi)`。

    .. math::
        r = \sqrt{x^2+y^2+z^2},\quad
        \theta = \arccos\!\left(\mathrm{clip}\!\left(\frac{z}{r+\epsilon}, -1, 1\right)\right),\quad
        \varphi = \operatorname{atan2}(y, x)

    :math:`\epsilon` 避免原点除零；clip 防止浮点误差使 ``arccos`` 参数越界。
    两者均无条件生效。
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    z = np.asarray(z, dtype=float)
    r = np.sqrt(x * x + y * y + z * z)
    theta = np.arccos(np.clip(z / (r + eps), -1.0, 1.0))
    phi = np.arctan2(y, x)
    return r, theta, phi
