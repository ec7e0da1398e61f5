r"""量子态与可视化配置

本模块以不可变数据类表示外部 UI 传入的参数快照：

- :class:`QuantumState`：量子数 :math:`(n, \ell, m)` 及其合法性校验
- :class:`HybridSpec`：杂化轨道族（sp/sp2/sp3）与序号
- :class:`OrbitalConfig`：一次渲染所需的完整配置

参数变更通过纯函数式的 ``with_*`` 方法完成，返回新对象。
``with_n`` / ``with_l`` 会级联截断 :math:`\ell` 与 :math:`m`，保证
:math:`0 \le \ell \le n-1,\ |m| \le \ell` 在任意变更后成立。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

__all__ = [
    "InvalidQuantumState",
    "InvalidHybridIndex",
    "QuantumState",
    "HybridSpec",
    "HYBRID_COUNTS",
    "OrbitalType",
    "HybridType",
    "VisualizationMode",
    "OrbitalConfig",
    "orbital_label",
]

OrbitalType = Literal["complex", "real", "hybrid"]
HybridType = Literal["sp", "sp2", "sp3"]
VisualizationMode = Literal["cloud", "surface"]

HYBRID_COUNTS: dict[str, int] = {"sp": 2, "sp2": 3, "sp3": 4}

_ORBITAL_TYPES = ("complex", "real", "hybrid")
_VISUALIZATION_MODES = ("cloud", "surface")


class InvalidQuantumState(ValueError):
    """量子数越界（:math:`n<1`、:math:`\\ell \\ge n` 或 :math:`|m|>\\ell`）。"""


class InvalidHybridIndex(ValueError):
    """杂化轨道族未知，或序号超出该族轨道数。"""


def _clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


@dataclass(frozen=True)
class QuantumState:
    r"""氢样轨道量子数。

    Attributes
    ----------
    n : int
        主量子数 :math:`n \ge 1`。
    l : int
        角量子数 :math:`0 \le \ell \le n-1`。
    m : int
        磁量子数 :math:`-\ell \le m \le \ell`。
    """

    n: int
    l: int
    m: int

    def validate(self) -> "QuantumState":
        """校验量子数范围，非法时抛出 :class:`InvalidQuantumState`；合法则返回自身。"""
        for name in ("n", "l", "m"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidQuantumState(f"量子数 {name} 必须为整数，实际: {value!r}")
        if self.n < 1:
            raise InvalidQuantumState(f"要求 n >= 1，实际 n={self.n}")
        if not (0 <= self.l <= self.n - 1):
            raise InvalidQuantumState(f"要求 0 <= l <= n-1，实际 n={self.n}, l={self.l}")
        if abs(self.m) > self.l:
            raise InvalidQuantumState(f"要求 |m| <= l，实际 l={self.l}, m={self.m}")
        return self


@dataclass(frozen=True)
class HybridSpec:
    """杂化轨道选择：族 ``family`` 与族内序号 ``index``。"""

    family: str
    index: int

    @property
    def count(self) -> int:
        if self.family not in HYBRID_COUNTS:
            raise InvalidHybridIndex(f"未知杂化类型: {self.family!r}（可选 sp/sp2/sp3）")
        return HYBRID_COUNTS[self.family]

    def validate(self) -> "HybridSpec":
        count = self.count
        if isinstance(self.index, bool) or not isinstance(self.index, int) or not (0 <= self.index < count):
            raise InvalidHybridIndex(
                f"{self.family} 杂化序号须在 [0, {count - 1}] 内，实际: {self.index!r}"
            )
        return self


@dataclass(frozen=True)
class OrbitalConfig:
    r"""一次场采样与渲染的完整配置（不可变）。

    默认值与交互界面的初始状态一致（3d，复数形式，sp3 第 1 个杂化轨道）。

    Attributes
    ----------
    n, l, m : int
        量子数。
    orbital_type : {"complex", "real", "hybrid"}
        轨道表示：复球谐、化学家实轨道或杂化轨道。
    hybrid_type : {"sp", "sp2", "sp3"}
        杂化族（仅 ``orbital_type="hybrid"`` 时生效）。
    hybrid_index : int
        族内序号，从 0 开始。
    quality : int
        网格分辨率（每轴点数），典型 16–128。
    opacity : float
        不透明度 :math:`\in (0, 1]`。
    visualization_mode : {"cloud", "surface"}
        体云或等值面。
    """

    n: int = 3
    l: int = 2
    m: int = 0
    orbital_type: str = "complex"
    hybrid_type: str = "sp3"
    hybrid_index: int = 0
    quality: int = 64
    opacity: float = 0.5
    visualization_mode: str = "cloud"

    @property
    def quantum_state(self) -> QuantumState:
        return QuantumState(self.n, self.l, self.m)

    @property
    def hybrid(self) -> HybridSpec:
        return HybridSpec(self.hybrid_type, self.hybrid_index)

    @property
    def effective_n(self) -> int:
        """决定空间范围与密度增益的主量子数；杂化轨道由 n=2 组分构成。"""
        return 2 if self.orbital_type == "hybrid" else self.n

    def validate(self) -> "OrbitalConfig":
        """校验全部字段；量子数/杂化错误抛出对应领域异常，其余抛出 ``ValueError``。"""
        self.quantum_state.validate()
        if self.orbital_type not in _ORBITAL_TYPES:
            raise ValueError(f"未知轨道类型: {self.orbital_type!r}")
        if self.orbital_type == "hybrid":
            self.hybrid.validate()
        if self.visualization_mode not in _VISUALIZATION_MODES:
            raise ValueError(f"未知可视化模式: {self.visualization_mode!r}")
        if not (0.0 < self.opacity <= 1.0):
            raise ValueError(f"opacity 须在 (0, 1] 内，实际: {self.opacity}")
        if self.quality < 2:
            raise ValueError(f"quality 必须 >= 2，实际: {self.quality}")
        return self

    # ---- 纯函数式状态转移 ----

    def with_n(self, n: int) -> "OrbitalConfig":
        new_n = max(1, int(n))
        new_l = min(self.l, new_n - 1)
        new_m = _clamp(self.m, -new_l, new_l)
        return replace(self, n=new_n, l=new_l, m=new_m)

    def with_l(self, l: int) -> "OrbitalConfig":
        new_l = _clamp(int(l), 0, self.n - 1)
        new_m = _clamp(self.m, -new_l, new_l)
        return replace(self, l=new_l, m=new_m)

    def with_m(self, m: int) -> "OrbitalConfig":
        return replace(self, m=_clamp(int(m), -self.l, self.l))

    def with_orbital_type(self, orbital_type: str) -> "OrbitalConfig":
        if orbital_type not in _ORBITAL_TYPES:
            raise ValueError(f"未知轨道类型: {orbital_type!r}")
        return replace(self, orbital_type=orbital_type)

    def with_hybrid_type(self, hybrid_type: str) -> "OrbitalConfig":
        HybridSpec(hybrid_type, 0).validate()
        return replace(self, hybrid_type=hybrid_type, hybrid_index=0)

    def with_hybrid_index(self, index: int) -> "OrbitalConfig":
        HybridSpec(self.hybrid_type, index).validate()
        return replace(self, hybrid_index=index)

    def with_visualization_mode(self, mode: str) -> "OrbitalConfig":
        if mode not in _VISUALIZATION_MODES:
            raise ValueError(f"未知可视化模式: {mode!r}")
        return replace(self, visualization_mode=mode)

    def with_opacity(self, opacity: float) -> "OrbitalConfig":
        if not (0.0 < opacity <= 1.0):
            raise ValueError(f"opacity 须在 (0, 1] 内，实际: {opacity}")
        return replace(self, opacity=float(opacity))

    def with_quality(self, quality: int) -> "OrbitalConfig":
        if quality < 2:
            raise ValueError(f"quality 必须 >= 2，实际: {quality}")
        return replace(self, quality=int(quality))


_SUBSHELLS = "spdfg"

# 实轨道下标：l=1 与 l=2 使用笛卡尔记号
_REAL_SUBSCRIPTS = {
    (1, 0): "z",
    (1, 1): "x",
    (1, -1): "y",
    (2, 0): "z²",
    (2, 1): "xz",
    (2, -1): "yz",
    (2, 2): "x²-y²",
    (2, -2): "xy",
}


def orbital_label(config: OrbitalConfig) -> str:
    """返回轨道的可读名称。

    Examples
    --------
    >>> orbital_label(OrbitalConfig(n=3, l=2, m=0, orbital_type="real"))
    '3d_z²'
    >>> orbital_label(OrbitalConfig(orbital_type="hybrid", hybrid_type="sp2", hybrid_index=1))
    'sp2_2'
    """
    if config.orbital_type == "hybrid":
        return f"{config.hybrid_type}_{config.hybrid_index + 1}"

    subshell = _SUBSHELLS[config.l] if config.l < len(_SUBSHELLS) else "?"
    subscript = ""
    if config.orbital_type == "real":
        subscript = _REAL_SUBSCRIPTS.get((config.l, config.m), "")
    if not subscript and config.m != 0:
        subscript = f"+{config.m}" if config.m > 0 else f"{config.m}"
    name = f"{config.n}{subshell}"
    return f"{name}_{subscript}" if subscript else name
