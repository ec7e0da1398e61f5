r"""相机光线与整帧渲染
======================

提供最小的针孔相机，用于在没有外部交互界面时生成整帧图像：

- :func:`orbit_camera`：绕原点的相机位置（局部立方体坐标，z 轴朝上）
- :func:`camera_rays`：逐像素光线起点与方向
- :func:`render_image`：按像素行分块，在线程池中调用合成计算核
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .compositor import CompositingParams, composite
from .field import ScalarField

__all__ = [
    "orbit_camera",
    "camera_rays",
    "render_image",
]


def orbit_camera(distance: float = 1.6, azimuth: float = 45.0, elevation: float = 20.0) -> np.ndarray:
    """球面轨道上的相机位置；角度单位为度。"""
    az = np.deg2rad(azimuth)
    el = np.deg2rad(elevation)
    return distance * np.array([np.cos(el) * np.cos(az), np.cos(el) * np.sin(az), np.sin(el)])


def camera_rays(
    eye,
    width: int,
    height: int,
    fov: float = 45.0,
    target=(0.0, 0.0, 0.0),
    up=(0.0, 0.0, 1.0),
) -> tuple[np.ndarray, np.ndarray]:
    """针孔相机逐像素光线。

    Parameters
    ----------
    eye : array_like, shape (3,)
        相机位置。
    width, height : int
        图像尺寸（像素）。
    fov : float, optional
        竖直视场角（度）。
    target, up : array_like, optional
        注视点与上方向；``up`` 与视线平行时自动改用 y 轴。

    Returns
    -------
    origins, directions : numpy.ndarray, shape (height, width, 3)
        方向已归一化；第 0 行为图像顶部。
    """
    if width < 1 or height < 1:
        raise ValueError(f"图像尺寸必须为正，实际: {width}x{height}")
    eye = np.asarray(eye, dtype=float)
    forward = np.asarray(target, dtype=float) - eye
    norm = np.linalg.norm(forward)
    if norm == 0:
        raise ValueError("相机位置与注视点重合")
    forward /= norm

    up = np.asarray(up, dtype=float)
    right = np.cross(forward, up)
    if np.linalg.norm(right) < 1e-8:
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
    right /= np.linalg.norm(right)
    true_up = np.cross(right, forward)

    half = np.tan(np.deg2rad(fov) / 2.0)
    aspect = width / height
    u = ((np.arange(width) + 0.5) / width * 2.0 - 1.0) * half * aspect
    v = (1.0 - (np.arange(height) + 0.5) / height * 2.0) * half
    uu, vv = np.meshgrid(u, v)

    directions = forward + uu[..., None] * right + vv[..., None] * true_up
    directions /= np.linalg.norm(directions, axis=-1, keepdims=True)
    origins = np.broadcast_to(eye, directions.shape).copy()
    return origins, directions


def render_image(
    field: ScalarField,
    params: CompositingParams,
    width: int,
    height: int,
    eye=None,
    fov: float = 45.0,
    kernel: str = "numpy",
    workers: int | None = None,
    rows_per_task: int = 8,
) -> np.ndarray:
    """渲染整帧 RGBA 图像，shape ``(height, width, 4)``，预乘 alpha。

    各光线互不依赖，按 ``rows_per_task`` 行一组分发到线程池；
    ``workers=1`` 时串行执行。
    """
    if eye is None:
        eye = orbit_camera()
    origins, directions = camera_rays(eye, width, height, fov=fov)
    image = np.zeros((height, width, 4))
    blocks = [slice(i, min(i + rows_per_task, height)) for i in range(0, height, rows_per_task)]

    def _render(rows: slice) -> np.ndarray:
        rgba = composite(field, params, origins[rows].reshape(-1, 3), directions[rows].reshape(-1, 3), kernel=kernel)
        return rgba.reshape(-1, width, 4)

    if workers == 1:
        for rows in blocks:
            image[rows] = _render(rows)
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for rows, rgba in zip(blocks, pool.map(_render, blocks)):
                image[rows] = rgba
    return image
