r"""特殊函数模块

提供氢样波函数所需的特殊函数：

- 阶乘与双阶乘（精确整数）
- 连带 Legendre 多项式 :math:`P_\ell^m(x)`（稳定三项递推）
- 广义 Laguerre 多项式 :math:`L_n^k(x)`（前向递推）

所有多项式函数接受标量或 ``numpy.ndarray``（逐元素计算）；
输入为标量时返回 ``float``。

符号约定
========

Condon–Shortley 相位 :math:`(-1)^{|m|}` 已并入 :func:`legendre` 的起始值
:math:`P_{|m|}^{|m|}`，球谐函数中不再重复乘入。
"""

from __future__ import annotations

import numpy as np

__all__ = [
    "factorial",
    "double_factorial",
    "legendre",
    "laguerre",
]


def _as_result(y: np.ndarray) -> float | np.ndarray:
    if np.ndim(y) == 0:
        return float(y)
    return y


def factorial(k: int) -> int:
    """阶乘 :math:`k!`；``k <= 1`` 时返回 1。

    使用 Python 整数，结果对任意 k 精确。
    """
    result = 1
    for i in range(2, int(k) + 1):
        result *= i
    return result


def double_factorial(k: int) -> int:
    """双阶乘 :math:`k!! = k (k-2) (k-4) \\cdots`；``k <= 0`` 时返回 1。"""
    result = 1
    i = int(k)
    while i > 0:
        result *= i
        i -= 2
    return result


def legendre(l: int, m: int, x: float | np.ndarray) -> float | np.ndarray:
    r"""连带 Legendre 多项式 :math:`P_\ell^m(x)`，:math:`x \in [-1, 1]`。

    起始值：

    .. math::
        P_{|m|}^{|m|}(x) = (-1)^{|m|} (2|m|-1)!! \, (1-x^2)^{|m|/2}, \qquad
        P_{|m|+1}^{|m|}(x) = x (2|m|+1) P_{|m|}^{|m|}(x)

    三项递推（:math:`\ell' = |m|+2, \dots, \ell`）：

    .. math::
        P_{\ell'}^{m} = \frac{x(2\ell'-1) P_{\ell'-1}^{m} - (\ell'+|m|-1) P_{\ell'-2}^{m}}{\ell' - |m|}

    Parameters
    ----------
    l : int
        角量子数 :math:`\ell \ge 0`。
    m : int
        磁量子数；仅 :math:`|m|` 参与计算。
    x : float or numpy.ndarray
        自变量，通常为 :math:`\cos\theta`。

    Returns
    -------
    float or numpy.ndarray
        :math:`P_\ell^{|m|}(x)`；当 :math:`|m| > \ell` 时为 0。

    Notes
    -----
    - 不使用闭式求和：闭式在较高 :math:`\ell` 时数值不稳定，且相位约定可能不同。
    - :math:`1-x^2` 在浮点误差下可能略小于 0，此处截断为 0。

    Examples
    --------
    >>> legendre(1, 1, 0.0)
    -1.0
    """
    x = np.asarray(x, dtype=float)
    abs_m = abs(int(m))
    l = int(l)
    if abs_m > l:
        return _as_result(np.zeros_like(x))

    p_mm = (
        (-1.0) ** abs_m
        * double_factorial(2 * abs_m - 1)
        * np.power(np.maximum(1.0 - x * x, 0.0), abs_m / 2.0)
    )
    if l == abs_m:
        return _as_result(p_mm)

    p_m1 = x * (2 * abs_m + 1) * p_mm
    if l == abs_m + 1:
        return _as_result(p_m1)

    for ll in range(abs_m + 2, l + 1):
        p_ll = (x * (2 * ll - 1) * p_m1 - (ll + abs_m - 1) * p_mm) / (ll - abs_m)
        p_mm = p_m1
        p_m1 = p_ll
    return _as_result(p_m1)


def laguerre(n: int, k: float, x: float | np.ndarray) -> float | np.ndarray:
    r"""广义 Laguerre 多项式 :math:`L_n^k(x)`。

    .. math::
        L_0^k = 1,\quad L_1^k = 1 + k - x,\quad
        L_{i+1}^k = \frac{(2i+1+k-x) L_i^k - (i+k) L_{i-1}^k}{i+1}

    Parameters
    ----------
    n : int
        多项式阶数 :math:`n \ge 0`。
    k : float
        广义参数（径向波函数中取 :math:`2\ell+1`）。
    x : float or numpy.ndarray
        自变量。
    """
    x = np.asarray(x, dtype=float)
    n = int(n)
    if n < 0:
        raise ValueError(f"Laguerre 阶数必须非负: n={n}")
    l0 = np.ones_like(x)
    if n == 0:
        return _as_result(l0)
    l1 = 1.0 + k - x
    for i in range(1, n):
        l_next = ((2 * i + 1 + k - x) * l1 - (i + k) * l0) / (i + 1)
        l0 = l1
        l1 = l_next
    return _as_result(l1)
