r"""三维标量场采样
==================

将立方空间区域离散为 :math:`N^3` 网格，逐点计算轨道密度与相位，
打包为两通道的 :class:`ScalarField`（密度、相位），作为体渲染的三维纹理。

计算流程
========

1. 空间半宽 :math:`\mathrm{extent} = 12 n + 5`（杂化轨道取 :math:`n=2`）
2. 网格点 :math:`x_i = (i/(N-1) - 1/2)\cdot 2\,\mathrm{extent}`（三轴相同）
3. 笛卡尔 → 球坐标（:math:`\epsilon` 防除零 + ``arccos`` 参数截断）
4. 按轨道类型求值：复波函数 :math:`|\psi|^2`、实轨道或杂化轨道振幅平方

复杂度
======

:math:`O(N^3)` 次求值，每次 :math:`O(\ell + n)`（Legendre/Laguerre 递推）。
任何参数变更都需整体重算，不存在增量更新路径。各网格点互不依赖，
因此按 x 方向切片分发到线程池并行计算。

版本化
======

:class:`FieldPipeline` 为每次请求分配递增的代号（generation）：
新请求使在途的旧请求失效，旧结果完成后直接丢弃（最新参数优先），
渲染端始终读取最新完成的场。
"""

from __future__ import annotations

import threading
import time
import warnings
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .constants import LARGE_FIELD_CELLS
from .grid import cube_axis, spatial_range
from .orbitals import evaluate_orbital
from .radial import RadialCurve, radial_probability_curve
from .state import OrbitalConfig
from .utils import cartesian_to_spherical

__all__ = [
    "ScalarField",
    "sample_field",
    "FieldPipeline",
]


@dataclass(frozen=True, eq=False)
class ScalarField:
    r"""两通道三维标量场。

    Attributes
    ----------
    density : numpy.ndarray
        密度通道，shape ``(N, N, N)``，轴序 ``(x, y, z)``，非负，只读。
    phase : numpy.ndarray
        相位通道，取值 {0, 1}（1 为正相位），只读。
    extent : float
        物理半宽（Bohr），网格覆盖 :math:`[-\mathrm{extent}, +\mathrm{extent}]^3`。
    config : OrbitalConfig
        生成该场的配置快照。
    version : int
        生成代号（见 :class:`FieldPipeline`）。
    """

    density: np.ndarray
    phase: np.ndarray
    extent: float
    config: OrbitalConfig
    version: int = 0

    @property
    def size(self) -> int:
        return int(self.density.shape[0])

    def axis(self) -> np.ndarray:
        """单轴物理坐标。"""
        return cube_axis(self.size, self.extent)


def _sample_slab(config: OrbitalConfig, axis: np.ndarray, ix: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    x, y, z = np.meshgrid(axis[ix], axis, axis, indexing="ij")
    r, theta, phi = cartesian_to_spherical(x, y, z)
    return evaluate_orbital(config, r, theta, phi)


def sample_field(
    config: OrbitalConfig,
    workers: int | None = None,
    version: int = 0,
    verbose: bool = False,
) -> ScalarField:
    """按配置采样三维标量场。

    Parameters
    ----------
    config : OrbitalConfig
        轨道与分辨率配置；非法时抛出领域异常。
    workers : int, optional
        线程数；``1`` 表示串行，``None`` 由线程池自动决定。
    version : int, optional
        写入结果的代号。
    verbose : bool, optional
        打印进度信息。

    Returns
    -------
    ScalarField
        只读的密度/相位场。

    Notes
    -----
    ``quality**3`` 超过 :data:`~orbitalfield.constants.LARGE_FIELD_CELLS` 时发出
    ``RuntimeWarning``（仅性能提示，不影响结果）。
    """
    config.validate()
    size = int(config.quality)
    extent = spatial_range(config.effective_n)
    axis = cube_axis(size, extent)

    if size**3 > LARGE_FIELD_CELLS:
        warnings.warn(
            f"场分辨率 {size}^3 = {size**3} 个网格点，计算量 O(N^3)，可能较慢",
            RuntimeWarning,
            stacklevel=2,
        )

    density = np.empty((size, size, size), dtype=float)
    phase = np.empty((size, size, size), dtype=float)

    t0 = time.time()
    if workers == 1:
        slabs = [np.arange(size)]
    else:
        n_chunks = min(size, 4 * (workers or 4))
        slabs = [s for s in np.array_split(np.arange(size), n_chunks) if s.size]

    if len(slabs) == 1:
        d, p = _sample_slab(config, axis, slabs[0])
        density[slabs[0]] = d
        phase[slabs[0]] = p
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [(ix, pool.submit(_sample_slab, config, axis, ix)) for ix in slabs]
            for ix, fut in futures:
                d, p = fut.result()
                density[ix] = d
                phase[ix] = p

    if verbose:
        print(
            f"[FieldSampler] v{version} n={config.n} l={config.l} m={config.m} "
            f"type={config.orbital_type} size={size} extent={extent:.1f} "
            f"max={density.max():.3e} 用时 {time.time() - t0:.3f}s"
        )

    density.setflags(write=False)
    phase.setflags(write=False)
    return ScalarField(density=density, phase=phase, extent=extent, config=config, version=version)


class FieldPipeline:
    """版本化的场生成管线（最新参数优先）。

    每次 :meth:`request` 分配新代号并在后台线程构建场；构建完成时若代号已不是
    最新，则结果被丢弃，不会覆盖 :meth:`latest`。不同代号之间不共享部分结果。

    Parameters
    ----------
    sampler : callable, optional
        场构建函数，签名同 :func:`sample_field`（``config, workers=, version=``）。
    max_workers : int, optional
        后台线程数，默认 2（场构建与径向曲线可并行）。
    sampler_workers : int, optional
        传给 ``sampler`` 的 ``workers``。
    verbose : bool, optional
        打印请求、完成与丢弃信息。

    Examples
    --------
    >>> with FieldPipeline() as pipe:
    ...     pipe.request(OrbitalConfig(n=1, l=0, m=0, quality=16))
    ...     field = pipe.wait()
    """

    def __init__(
        self,
        sampler: Callable[..., ScalarField] = sample_field,
        max_workers: int = 2,
        sampler_workers: int | None = None,
        verbose: bool = False,
    ):
        self._sampler = sampler
        self._sampler_workers = sampler_workers
        self._verbose = verbose
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: ScalarField | None = None
        self._pending: Future | None = None
        self._discarded = 0

    @property
    def generation(self) -> int:
        """最近一次请求的代号。"""
        with self._lock:
            return self._generation

    @property
    def discarded(self) -> int:
        """被新请求取代而丢弃的构建数。"""
        with self._lock:
            return self._discarded

    def request(self, config: OrbitalConfig) -> Future:
        """提交新的场构建请求，使所有在途的旧请求失效。"""
        config.validate()
        with self._lock:
            self._generation += 1
            gen = self._generation
            future = self._executor.submit(self._build, config, gen)
            self._pending = future
        if self._verbose:
            print(f"[FieldPipeline] 请求 v{gen}")
        return future

    def _build(self, config: OrbitalConfig, gen: int) -> ScalarField | None:
        with self._lock:
            if gen != self._generation:
                self._discarded += 1
                return None
        field = self._sampler(config, workers=self._sampler_workers, version=gen)
        with self._lock:
            if gen != self._generation:
                self._discarded += 1
                stale = True
            else:
                self._latest = field
                stale = False
        if self._verbose:
            print(f"[FieldPipeline] v{gen} {'已过期，丢弃' if stale else '完成'}")
        return None if stale else field

    def latest(self) -> ScalarField | None:
        """最新完成的场；尚无结果时为 ``None``。"""
        with self._lock:
            return self._latest

    def wait(self, timeout: float | None = None) -> ScalarField | None:
        """阻塞直到最近一次请求结束，返回 :meth:`latest`。"""
        with self._lock:
            pending = self._pending
        if pending is not None:
            pending.result(timeout=timeout)
        return self.latest()

    def request_curve(self, config: OrbitalConfig, **kwargs) -> "Future[RadialCurve]":
        """后台计算径向分布曲线（只读取量子数，可与场构建并行）。"""
        return self._executor.submit(radial_probability_curve, config.n, config.l, **kwargs)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "FieldPipeline":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
