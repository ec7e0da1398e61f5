"""orbitalfield 包
==================

氢样原子轨道的三维场计算与体渲染合成。

- 特殊函数：阶乘、连带 Legendre / 广义 Laguerre 多项式
- 轨道求值：球谐函数、径向函数、复/实/杂化轨道
- 场采样：立方网格上的密度/相位两通道标量场（线程池并行，版本化管线）
- 体渲染：光线步进合成（体云/等值面），可替换计算核

注：本项目所有文档与注释均使用中文，Docstring 采用 Sphinx + NumPy 风格，公式使用 ``:math:`` 标记。
"""

from orbitalfield.special import factorial, double_factorial, legendre, laguerre
from orbitalfield.state import (
    InvalidHybridIndex,
    InvalidQuantumState,
    HybridSpec,
    OrbitalConfig,
    QuantumState,
    orbital_label,
)
from orbitalfield.orbitals import (
    spherical_harmonic,
    radial_wave_function,
    wave_function,
    probability_density,
    real_wave_function,
    hybrid_wave_function,
)
from orbitalfield.radial import RadialCurve, radial_probability_curve, radial_normalization
from orbitalfield.field import ScalarField, FieldPipeline, sample_field
from orbitalfield.compositor import CompositingParams, compositing_params, composite, march_ray, render_rays
from orbitalfield.camera import camera_rays, orbit_camera, render_image

__all__ = [
    "factorial",
    "double_factorial",
    "legendre",
    "laguerre",
    "InvalidQuantumState",
    "InvalidHybridIndex",
    "QuantumState",
    "HybridSpec",
    "OrbitalConfig",
    "orbital_label",
    "spherical_harmonic",
    "radial_wave_function",
    "wave_function",
    "probability_density",
    "real_wave_function",
    "hybrid_wave_function",
    "RadialCurve",
    "radial_probability_curve",
    "radial_normalization",
    "ScalarField",
    "FieldPipeline",
    "sample_field",
    "CompositingParams",
    "compositing_params",
    "composite",
    "march_ray",
    "render_rays",
    "camera_rays",
    "orbit_camera",
    "render_image",
]

__version__ = "0.1.0"
