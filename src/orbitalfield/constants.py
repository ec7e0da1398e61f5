"""常量集中维护
================

集中维护场采样与体渲染使用的经验常量，便于校准与统一管理。

注意：密度增益与等值面阈值均为可视化经验值，不具有物理意义。
"""

from __future__ import annotations

# 1 Bohr 对应的埃（Å）
BOHR_TO_ANGSTROM = 0.529177

# 采样立方体半宽：range = RANGE_SLOPE * n + RANGE_OFFSET（Bohr）
RANGE_SLOPE = 12.0
RANGE_OFFSET = 5.0

# 球坐标转换中防止 r=0 除零的小量
SPHERICAL_EPS = 1e-5

# 密度增益：texture 写入增益 × 经验系数，再乘以 n^6
FIELD_GAIN = 40.0
BOOST_SCALE = 50.0
BOOST_POWER = 6

# 等值面阈值基准：threshold = ISO_BASE / n^2
ISO_BASE = 0.02

# 光线步进
MAX_MARCH_STEPS = 128
EMPTY_DENSITY = 1e-4
ALPHA_SATURATION = 0.95
ALPHA_DISCARD = 1e-3
CLOUD_ALPHA_GAIN = 2.0

# 等值面着色：clip(SHADE_BASE + SHADE_GAIN * |Δd * SHADE_SCALE|, lo, hi)
SHADE_BASE = 0.3
SHADE_GAIN = 0.7
SHADE_SCALE = 20.0
SHADE_RANGE = (0.4, 1.0)

# 相位配色 (R, G, B)：负相位 → 正相位
NEGATIVE_PHASE_COLOR = (0.95, 0.3, 0.7)
POSITIVE_PHASE_COLOR = (0.2, 0.6, 1.0)

# 场采样体素数超过该值时给出性能提示
LARGE_FIELD_CELLS = 128**3
