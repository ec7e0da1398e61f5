r"""氢样轨道求值模块

波函数分离为径向与角向两部分：

.. math::

    \psi_{n\ell m}(r, \theta, \varphi) = R_{n\ell}(r)\, Y_\ell^m(\theta, \varphi)

本模块提供：

- 复球谐函数 :math:`Y_\ell^m` 与径向函数 :math:`R_{n\ell}`
- 复波函数与概率密度 :math:`|\psi|^2`
- 化学家约定的实轨道（:math:`p_x, p_y, d_{xy}` 等）
- sp/sp2/sp3 杂化轨道（n=2 的 s、p 组分线性组合）

所有函数对 :math:`(r, \theta, \varphi)` 逐元素向量化。

单位
====

原子单位：长度以 Bohr 半径 :math:`a_0` 计（默认 :math:`a_0=1`）。

References
----------
.. [Griffiths] Griffiths, D. J. (2018)
   "Introduction to Quantum Mechanics", 3rd ed., Section 4.2
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from .special import factorial, laguerre, legendre
from .state import HYBRID_COUNTS, InvalidHybridIndex, OrbitalConfig, QuantumState

__all__ = [
    "spherical_harmonic",
    "radial_wave_function",
    "wave_function",
    "probability_density",
    "real_wave_function",
    "hybrid_wave_function",
    "hybrid_coefficients",
    "evaluate_orbital",
]

_SQRT2 = np.sqrt(2.0)

# 杂化组分顺序 (s, p_x, p_y, p_z) 对应的 (l, m)
_HYBRID_BASIS = ((0, 0), (1, 1), (1, -1), (1, 0))


def _angular_norm(l: int, abs_m: int) -> float:
    return float(np.sqrt((2 * l + 1) * factorial(l - abs_m) / (4.0 * np.pi * factorial(l + abs_m))))


def spherical_harmonic(l: int, m: int, theta, phi):
    r"""复球谐函数 :math:`Y_\ell^m(\theta, \varphi)`。

    .. math::
        Y_\ell^m = \sqrt{\frac{(2\ell+1)(\ell-|m|)!}{4\pi(\ell+|m|)!}}\;
        P_\ell^{|m|}(\cos\theta)\, e^{i m \varphi}

    Condon–Shortley 相位已包含在 :func:`~orbitalfield.special.legendre` 中。

    Returns
    -------
    complex or numpy.ndarray
        复振幅（实部 ∝ :math:`\cos m\varphi`，虚部 ∝ :math:`\sin m\varphi`）。
    """
    norm = _angular_norm(l, abs(m))
    p_lm = legendre(l, m, np.cos(theta))
    phase = m * np.asarray(phi, dtype=float)
    return norm * p_lm * (np.cos(phase) + 1j * np.sin(phase))


def radial_wave_function(n: int, l: int, r, a0: float = 1.0):
    r"""径向波函数 :math:`R_{n\ell}(r)`。

    .. math::
        \rho = \frac{2r}{n a_0},\qquad
        N = \sqrt{\left(\frac{2}{n a_0}\right)^3 \frac{(n-\ell-1)!}{2n\,(n+\ell)!}},\qquad
        R_{n\ell} = N e^{-\rho/2} \rho^\ell L_{n-\ell-1}^{2\ell+1}(\rho)

    Parameters
    ----------
    n, l : int
        量子数，要求 :math:`0 \le \ell < n`，否则抛出
        :class:`~orbitalfield.state.InvalidQuantumState`。
    r : float or numpy.ndarray
        径向坐标，要求 :math:`r \ge 0`。
    a0 : float, optional
        Bohr 半径，默认 1（原子单位）。

    Notes
    -----
    - 归一化常数分母为 :math:`(n+\ell)!` 的一次幂，对应现代（非 Rodrigues 旧式）
      Laguerre 约定，满足 :math:`\int_0^\infty r^2 R^2 dr = 1`。
    - :math:`r=0` 时 :math:`\rho^\ell` 对 :math:`\ell>0` 为 0，与物理一致。
    """
    QuantumState(n, l, 0).validate()
    r = np.asarray(r, dtype=float)
    rho = 2.0 * r / (n * a0)
    norm = np.sqrt((2.0 / (n * a0)) ** 3 * factorial(n - l - 1) / (2.0 * n * factorial(n + l)))
    out = norm * np.exp(-rho / 2.0) * np.power(rho, l) * laguerre(n - l - 1, 2 * l + 1, rho)
    if np.ndim(out) == 0:
        return float(out)
    return out


def wave_function(n: int, l: int, m: int, r, theta, phi):
    """复波函数 :math:`\\psi = R_{n\\ell}(r) Y_\\ell^m(\\theta, \\varphi)`。"""
    QuantumState(n, l, m).validate()
    return radial_wave_function(n, l, r) * spherical_harmonic(l, m, theta, phi)


def probability_density(n: int, l: int, m: int, r, theta, phi):
    """概率密度 :math:`|\\psi|^2`。"""
    psi = wave_function(n, l, m, r, theta, phi)
    return psi.real * psi.real + psi.imag * psi.imag


def real_wave_function(n: int, l: int, m: int, r, theta, phi):
    r"""化学家约定的实轨道。

    .. math::
        \psi^{\mathrm{real}}_{n\ell m} =
        \begin{cases}
        R\, N P_\ell^0(\cos\theta), & m = 0 \\
        \sqrt{2}\, R\, N P_\ell^{|m|}(\cos\theta) \cos(m\varphi), & m > 0 \\
        \sqrt{2}\, R\, N P_\ell^{|m|}(\cos\theta) \sin(|m|\varphi), & m < 0
        \end{cases}

    :math:`m>0` 对应余弦族（:math:`p_x, d_{xz}, d_{x^2-y^2}`），
    :math:`m<0` 对应正弦族（:math:`p_y, d_{yz}, d_{xy}`）。
    """
    QuantumState(n, l, m).validate()
    radial = radial_wave_function(n, l, r)
    abs_m = abs(m)
    norm = _angular_norm(l, abs_m)
    p_lm = legendre(l, abs_m, np.cos(theta))

    if m == 0:
        return radial * norm * p_lm

    phi = np.asarray(phi, dtype=float)
    trig = np.cos(m * phi) if m > 0 else np.sin(abs_m * phi)
    return radial * (_SQRT2 * norm) * p_lm * trig


def hybrid_wave_function(family: str, index: int, r, theta, phi, strict: bool = True):
    r"""sp / sp2 / sp3 杂化轨道振幅。

    由 2s、2p_x、2p_y、2p_z 实轨道线性组合：

    - sp:  :math:`(s \pm p_z)/\sqrt{2}`
    - sp2: :math:`s/\sqrt{3} + \sqrt{2/3}\,p_x`，
      :math:`s/\sqrt{3} - p_x/\sqrt{6} \pm p_y/\sqrt{2}`
    - sp3: :math:`\tfrac12(s \pm p_x \pm p_y \pm p_z)`（四面体取向）

    Parameters
    ----------
    family : {"sp", "sp2", "sp3"}
        杂化族。
    index : int
        族内序号，范围 ``[0, count-1]``。
    r, theta, phi
        球坐标。
    strict : bool, optional
        为 ``True``（默认）时非法族/序号抛出 :class:`InvalidHybridIndex`；
        为 ``False`` 时返回零振幅（与早期界面行为一致）。
    """
    count = HYBRID_COUNTS.get(family)
    if count is None or not (0 <= index < count):
        if strict:
            raise InvalidHybridIndex(f"非法杂化选择: family={family!r}, index={index!r}")
        return np.zeros_like(np.asarray(r, dtype=float))

    out = 0.0
    for c, (l, m) in zip(_hybrid_weights(family)[index], _HYBRID_BASIS):
        if c != 0.0:
            out = out + c * real_wave_function(2, l, m, r, theta, phi)
    return out


@lru_cache(maxsize=None)
def _hybrid_weights(family: str) -> np.ndarray:
    weights = np.array(hybrid_coefficients(family).evalf().tolist(), dtype=float)
    weights.setflags(write=False)
    return weights


def evaluate_orbital(config: OrbitalConfig, r, theta, phi) -> tuple[np.ndarray, np.ndarray]:
    """按配置的轨道类型计算 ``(密度, 相位)``。

    - complex：密度 :math:`|\\psi|^2`，相位为 :math:`\\mathrm{Re}\\,\\psi \\ge 0`
    - real / hybrid：密度为实振幅平方，相位为振幅符号

    相位取值 {0, 1}，1 表示正相位。
    """
    if config.orbital_type == "complex":
        psi = wave_function(config.n, config.l, config.m, r, theta, phi)
        density = psi.real * psi.real + psi.imag * psi.imag
        amplitude = psi.real
    elif config.orbital_type == "real":
        amplitude = real_wave_function(config.n, config.l, config.m, r, theta, phi)
        density = amplitude * amplitude
    elif config.orbital_type == "hybrid":
        amplitude = hybrid_wave_function(config.hybrid_type, config.hybrid_index, r, theta, phi)
        density = amplitude * amplitude
    else:
        raise ValueError(f"未知轨道类型: {config.orbital_type!r}")
    phase = (np.asarray(amplitude) >= 0).astype(float)
    return np.asarray(density, dtype=float), phase


def hybrid_coefficients(family: str):
    r"""杂化轨道的精确组合系数矩阵（``sympy.Matrix``）。

    行对应族内序号，列依次为 :math:`(s, p_x, p_y, p_z)`。
    :func:`hybrid_wave_function` 使用其浮点形式。
    sp 与 sp2 仅使用其中一/两个 p 组分，其余列为 0。

    Notes
    -----
    系数矩阵行正交归一（:math:`C C^T = I`），即变换是幺正的：
    同一点处各杂化轨道振幅平方之和等于所用组分振幅平方之和。

    Examples
    --------
    >>> hybrid_coefficients("sp")
    Matrix([
    [sqrt(2)/2, 0, 0,  sqrt(2)/2],
    [sqrt(2)/2, 0, 0, -sqrt(2)/2]])
    """
    import sympy

    sqrt = sympy.sqrt
    half = sympy.Rational(1, 2)
    if family == "sp":
        rows = [
            [1 / sqrt(2), 0, 0, 1 / sqrt(2)],
            [1 / sqrt(2), 0, 0, -1 / sqrt(2)],
        ]
    elif family == "sp2":
        rows = [
            [1 / sqrt(3), sqrt(sympy.Rational(2, 3)), 0, 0],
            [1 / sqrt(3), -1 / sqrt(6), 1 / sqrt(2), 0],
            [1 / sqrt(3), -1 / sqrt(6), -1 / sqrt(2), 0],
        ]
    elif family == "sp3":
        rows = [
            [half, half, half, half],
            [half, half, -half, -half],
            [half, -half, half, -half],
            [half, -half, -half, half],
        ]
    else:
        raise InvalidHybridIndex(f"未知杂化类型: {family!r}（可选 sp/sp2/sp3）")
    return sympy.Matrix(rows)
