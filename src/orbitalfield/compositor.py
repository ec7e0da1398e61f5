r"""体渲染合成（光线步进）
==========================

对每条相机光线在局部单位立方体 :math:`[-0.5, 0.5]^3` 内步进采样标量场，
按前向后（front-to-back）规则合成颜色与不透明度。场的物理范围只影响
采样阶段的坐标映射，与合成无关。

两种模式
========

- **体云** (``mode=0``)：逐步累积

  .. math::
      \alpha_i = \min(d_i \cdot \mathrm{opacity} \cdot \Delta t \cdot 2,\ 1),\quad
      w_i = (1 - A)\,\alpha_i,\quad
      C \mathrel{+}= w_i\, c(\phi_i),\quad A \mathrel{+}= w_i

- **等值面** (``mode=1``)：首个密度超过阈值的采样点处，向后一步重采样
  估计梯度，着色因子 :math:`\mathrm{clip}(0.3 + 0.7|20\,\Delta d|, 0.4, 1)`，
  不透明输出并立即终止。

单条光线的状态机：ENTERING（求交）→ MARCHING（步进）→ TERMINATED。
终止原因：未命中、光线走完、不透明度饱和（:math:`A \ge 0.95`）、
命中等值面，或达到 128 步安全上限（截断，返回部分结果）。
最终 :math:`A < 10^{-3}` 时输出全透明。

计算核
======

合成逻辑以可替换的“计算核”形式提供：纯函数
``kernel(field, params, origins, directions) -> rgba``。

- ``"reference"``：逐光线的标量实现（:func:`march_ray`），用于测试对照
- ``"numpy"``：所有光线同步步进的批量实现（:func:`render_rays`）

两者结果须在浮点误差内一致。
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field as dc_field
from typing import Callable

import numpy as np
from scipy.ndimage import map_coordinates

from .constants import (
    ALPHA_DISCARD,
    ALPHA_SATURATION,
    BOOST_POWER,
    BOOST_SCALE,
    CLOUD_ALPHA_GAIN,
    EMPTY_DENSITY,
    FIELD_GAIN,
    ISO_BASE,
    MAX_MARCH_STEPS,
    NEGATIVE_PHASE_COLOR,
    POSITIVE_PHASE_COLOR,
    SHADE_BASE,
    SHADE_GAIN,
    SHADE_RANGE,
    SHADE_SCALE,
)
from .field import ScalarField
from .state import OrbitalConfig

__all__ = [
    "CLOUD",
    "ISOSURFACE",
    "CompositingParams",
    "compositing_params",
    "density_boost",
    "hit_box",
    "sample_trilinear",
    "phase_color",
    "MarchState",
    "RayTrace",
    "march_ray",
    "trace_ray",
    "reference_kernel",
    "render_rays",
    "KERNELS",
    "composite",
]

CLOUD = 0
ISOSURFACE = 1

_BOX_MIN = -0.5
_BOX_MAX = 0.5
_NEG = np.asarray(NEGATIVE_PHASE_COLOR, dtype=float)
_POS = np.asarray(POSITIVE_PHASE_COLOR, dtype=float)
_TRANSPARENT = np.zeros(4)


@dataclass(frozen=True)
class CompositingParams:
    """合成参数；应通过 :func:`compositing_params` 由配置派生。

    Attributes
    ----------
    opacity : float
        不透明度 :math:`\\in (0, 1]`。
    steps : int
        入射点到出射点之间的步数（另受 128 步上限约束）。
    iso_threshold : float
        等值面阈值（作用于增益后的密度）。
    mode : int
        ``CLOUD`` (0) 或 ``ISOSURFACE`` (1)。
    density_boost : float
        密度增益。
    """

    opacity: float
    steps: int
    iso_threshold: float
    mode: int
    density_boost: float

    def __post_init__(self):
        if not (0.0 < self.opacity <= 1.0):
            raise ValueError(f"opacity 须在 (0, 1] 内，实际: {self.opacity}")
        if self.steps < 1:
            raise ValueError(f"steps 必须为正整数，实际: {self.steps}")
        if self.mode not in (CLOUD, ISOSURFACE):
            raise ValueError(f"未知合成模式: {self.mode}")


def density_boost(n: int) -> float:
    r"""密度增益 :math:`40 \times 50 \times n^6`。

    高 :math:`n` 轨道的密度分散在更大的体积中（1s 峰值约 0.3，3d 约 1.5e-4），
    不做补偿时几乎不可见。
    """
    return FIELD_GAIN * BOOST_SCALE * float(n) ** BOOST_POWER


def compositing_params(config: OrbitalConfig) -> CompositingParams:
    """由配置派生合成参数：步数 ``2*quality``，阈值 :math:`0.02/n^2`。"""
    config.validate()
    n = config.effective_n
    return CompositingParams(
        opacity=float(config.opacity),
        steps=2 * int(config.quality),
        iso_threshold=ISO_BASE / (n * n),
        mode=CLOUD if config.visualization_mode == "cloud" else ISOSURFACE,
        density_boost=density_boost(n),
    )


def hit_box(origin, direction) -> tuple[np.ndarray, np.ndarray]:
    r"""光线与 :math:`[-0.5, 0.5]^3` 的求交（slab 方法）。

    Parameters
    ----------
    origin, direction : array_like, shape (..., 3)
        光线起点与方向。

    Returns
    -------
    t0, t1 : numpy.ndarray or float
        入射与出射参数；:math:`t_0 > t_1` 表示未命中。

    Notes
    -----
    方向分量为 0 时除法得到 :math:`\pm\infty`，slab 退化为整条直线或空集；
    ``0 * inf`` 产生的 NaN 由 ``fmin/fmax`` 忽略。
    """
    origin = np.asarray(origin, dtype=float)
    direction = np.asarray(direction, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        tmin = (_BOX_MIN - origin) / direction
        tmax = (_BOX_MAX - origin) / direction
    real_min = np.fmin(tmin, tmax)
    real_max = np.fmax(tmin, tmax)
    t0 = np.fmax.reduce(real_min, axis=-1)
    t1 = np.fmin.reduce(real_max, axis=-1)
    if np.ndim(t0) == 0:
        return float(t0), float(t1)
    return t0, t1


def sample_trilinear(volume: np.ndarray, points) -> np.ndarray:
    """在局部立方体坐标处三线性插值采样场通道。

    纹理坐标为 ``p + 0.5``，按网格节点对齐映射到索引 ``(p + 0.5) * (N - 1)``；
    越界点按边缘值截断。
    """
    points = np.asarray(points, dtype=float)
    size = volume.shape[0]
    coords = (points.reshape(-1, 3) + 0.5) * (size - 1)
    values = map_coordinates(volume, coords.T, order=1, mode="nearest")
    return values.reshape(points.shape[:-1])


def phase_color(phase) -> np.ndarray:
    """相位 → 颜色：负相位色与正相位色的线性插值。"""
    a = np.asarray(phase, dtype=float)[..., None]
    return _NEG * (1.0 - a) + _POS * a


def _iso_shading(density, prev_density):
    return np.clip(SHADE_BASE + SHADE_GAIN * np.abs((density - prev_density) * SHADE_SCALE), *SHADE_RANGE)


def _normalize(direction: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(direction, axis=-1, keepdims=True)
    if np.any(norm == 0):
        raise ValueError("光线方向不能为零向量")
    return direction / norm


class MarchState(enum.Enum):
    ENTERING = "entering"
    MARCHING = "marching"
    TERMINATED = "terminated"


@dataclass
class RayTrace:
    """单条光线的步进记录。"""

    rgba: np.ndarray = dc_field(default_factory=lambda: _TRANSPARENT.copy())
    state: MarchState = MarchState.ENTERING
    reason: str = ""
    steps: int = 0
    alphas: list[float] = dc_field(default_factory=list)


def trace_ray(field: ScalarField, params: CompositingParams, origin, direction) -> RayTrace:
    """逐光线参考实现，返回含状态与每步累积不透明度的 :class:`RayTrace`。

    ``reason`` 取值：``"miss"``、``"exhausted"``（走完光线）、``"saturated"``、
    ``"isosurface"``、``"step_cap"``（128 步截断）。
    """
    origin = np.asarray(origin, dtype=float)
    direction = _normalize(np.asarray(direction, dtype=float))
    trace = RayTrace()

    t0, t1 = hit_box(origin, direction)
    if not t0 <= t1:
        trace.state = MarchState.TERMINATED
        trace.reason = "miss"
        return trace

    trace.state = MarchState.MARCHING
    t = max(0.0, t0)
    t_end = t1
    step = (t_end - t) / params.steps
    color = np.zeros(3)
    alpha = 0.0
    reason = "step_cap"

    for _ in range(MAX_MARCH_STEPS):
        if t >= t_end:
            reason = "exhausted"
            break
        if alpha >= ALPHA_SATURATION:
            reason = "saturated"
            break

        p = origin + direction * t
        density = float(sample_trilinear(field.density, p)) * params.density_boost
        phase = float(sample_trilinear(field.phase, p))
        trace.steps += 1

        if density > EMPTY_DENSITY:
            pc = phase_color(phase)
            if params.mode == CLOUD:
                a = min(density * params.opacity * step * CLOUD_ALPHA_GAIN, 1.0)
                weight = (1.0 - alpha) * a
                color = color + weight * pc
                alpha += weight
            elif density > params.iso_threshold:
                prev = origin + direction * (t - step)
                prev_density = float(sample_trilinear(field.density, prev)) * params.density_boost
                color = pc * _iso_shading(density, prev_density)
                alpha = 1.0
                trace.alphas.append(alpha)
                reason = "isosurface"
                break

        trace.alphas.append(alpha)
        t += step

    trace.state = MarchState.TERMINATED
    trace.reason = reason
    if alpha >= ALPHA_DISCARD:
        trace.rgba = np.array([color[0], color[1], color[2], alpha])
    return trace


def march_ray(field: ScalarField, params: CompositingParams, origin, direction) -> np.ndarray:
    """单条光线的 RGBA（参考实现）。"""
    return trace_ray(field, params, origin, direction).rgba


def reference_kernel(field: ScalarField, params: CompositingParams, origins, directions) -> np.ndarray:
    origins = np.asarray(origins, dtype=float).reshape(-1, 3)
    directions = np.asarray(directions, dtype=float).reshape(-1, 3)
    out = np.zeros((origins.shape[0], 4))
    for i in range(origins.shape[0]):
        out[i] = march_ray(field, params, origins[i], directions[i])
    return out


def render_rays(field: ScalarField, params: CompositingParams, origins, directions) -> np.ndarray:
    """批量光线步进（numpy 计算核）。

    所有光线同步前进，用掩码屏蔽已终止的光线；逐光线的运算顺序与
    :func:`march_ray` 相同。

    Parameters
    ----------
    origins, directions : array_like, shape (M, 3)

    Returns
    -------
    numpy.ndarray, shape (M, 4)
        预乘 alpha 的 RGBA。
    """
    origins = np.asarray(origins, dtype=float).reshape(-1, 3)
    directions = _normalize(np.asarray(directions, dtype=float).reshape(-1, 3))
    m = origins.shape[0]

    t0, t1 = hit_box(origins, directions)
    t0 = np.atleast_1d(t0)
    t1 = np.atleast_1d(t1)
    hit = t0 <= t1
    t = np.where(hit, np.maximum(0.0, t0), 0.0)
    t_end = np.where(hit, t1, 0.0)
    step = (t_end - t) / params.steps

    color = np.zeros((m, 3))
    alpha = np.zeros(m)
    active = hit.copy()

    for _ in range(MAX_MARCH_STEPS):
        active &= (t < t_end) & (alpha < ALPHA_SATURATION)
        idx = np.nonzero(active)[0]
        if idx.size == 0:
            break

        p = origins[idx] + directions[idx] * t[idx, None]
        density = sample_trilinear(field.density, p) * params.density_boost
        phase = sample_trilinear(field.phase, p)
        filled = density > EMPTY_DENSITY
        pc = phase_color(phase)

        if params.mode == CLOUD:
            a = np.minimum(density * params.opacity * step[idx] * CLOUD_ALPHA_GAIN, 1.0)
            weight = np.where(filled, (1.0 - alpha[idx]) * a, 0.0)
            color[idx] += weight[:, None] * pc
            alpha[idx] += weight
        else:
            surf = filled & (density > params.iso_threshold)
            if np.any(surf):
                j = idx[surf]
                prev = origins[j] + directions[j] * (t[j] - step[j])[:, None]
                prev_density = sample_trilinear(field.density, prev) * params.density_boost
                color[j] = pc[surf] * _iso_shading(density[surf], prev_density)[:, None]
                alpha[j] = 1.0
                active[j] = False

        t[idx] += step[idx]

    rgba = np.concatenate([color, alpha[:, None]], axis=1)
    rgba[alpha < ALPHA_DISCARD] = 0.0
    return rgba


Kernel = Callable[[ScalarField, CompositingParams, np.ndarray, np.ndarray], np.ndarray]

KERNELS: dict[str, Kernel] = {
    "reference": reference_kernel,
    "numpy": render_rays,
}


def composite(field: ScalarField, params: CompositingParams, origins, directions, kernel: str = "numpy") -> np.ndarray:
    """用指定计算核合成一批光线。"""
    if kernel not in KERNELS:
        raise ValueError(f"未知计算核: {kernel!r}（可选 {sorted(KERNELS)}）")
    return KERNELS[kernel](field, params, origins, directions)
