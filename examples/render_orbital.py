#!/usr/bin/env python
"""轨道渲染示例入口。

采样三维场、渲染一帧 RGBA 图像，并绘制径向分布曲线。

示例::

    python examples/render_orbital.py --n 3 --l 2 --m 0 --type real --out 3dz2.png
    python examples/render_orbital.py --type hybrid --hybrid sp3 --index 1 --mode surface
"""

import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from orbitalfield import (
    FieldPipeline,
    OrbitalConfig,
    orbit_camera,
    orbital_label,
    render_image,
)
from orbitalfield.compositor import compositing_params


def build_config(args) -> OrbitalConfig:
    """由命令行参数构建配置；量子数按界面规则级联截断。"""
    cfg = OrbitalConfig(quality=args.quality)
    cfg = cfg.with_n(args.n).with_l(args.l).with_m(args.m)
    cfg = cfg.with_orbital_type(args.type)
    if args.type == "hybrid":
        cfg = cfg.with_hybrid_type(args.hybrid).with_hybrid_index(args.index)
    return cfg.with_opacity(args.opacity).with_visualization_mode(args.mode)


def main():
    parser = argparse.ArgumentParser(description="氢样轨道体渲染")
    parser.add_argument("--n", type=int, default=3)
    parser.add_argument("--l", type=int, default=2)
    parser.add_argument("--m", type=int, default=0)
    parser.add_argument("--type", choices=["complex", "real", "hybrid"], default="complex")
    parser.add_argument("--hybrid", choices=["sp", "sp2", "sp3"], default="sp3")
    parser.add_argument("--index", type=int, default=0)
    parser.add_argument("--quality", type=int, default=48, help="网格分辨率（每轴点数）")
    parser.add_argument("--opacity", type=float, default=0.5)
    parser.add_argument("--mode", choices=["cloud", "surface"], default="cloud")
    parser.add_argument("--size", type=int, default=256, help="图像边长（像素）")
    parser.add_argument("--azimuth", type=float, default=45.0)
    parser.add_argument("--elevation", type=float, default=20.0)
    parser.add_argument("--kernel", choices=["numpy", "reference"], default="numpy")
    parser.add_argument("--out", type=str, default="orbital.png")
    parser.add_argument("--unit", choices=["bohr", "angstrom"], default="angstrom")
    args = parser.parse_args()

    cfg = build_config(args)
    label = orbital_label(cfg)
    print(f"[render] {label}  n={cfg.n} l={cfg.l} m={cfg.m} type={cfg.orbital_type} quality={cfg.quality}")

    with FieldPipeline(verbose=True) as pipe:
        pipe.request(cfg)
        curve_future = pipe.request_curve(cfg, unit=args.unit)
        field = pipe.wait()
        curve = curve_future.result()

    params = compositing_params(cfg)
    eye = orbit_camera(1.6, args.azimuth, args.elevation)
    image = render_image(field, params, args.size, args.size, eye=eye, kernel=args.kernel)

    # 预乘 alpha 合成到黑色背景
    rgb = np.clip(image[..., :3], 0.0, 1.0)

    fig, (ax_img, ax_curve) = plt.subplots(1, 2, figsize=(11, 5), gridspec_kw={"width_ratios": [1, 1.2]})
    ax_img.imshow(rgb, origin="upper")
    ax_img.set_title(label)
    ax_img.axis("off")

    ax_curve.fill_between(curve.r, curve.probability, color="#4facfe", alpha=0.4)
    ax_curve.plot(curve.r, curve.probability, color="#4facfe")
    ax_curve.set_xlabel("r (Å)" if curve.unit == "angstrom" else "r (Bohr)")
    ax_curve.set_ylabel("P(r) = r²R² (1/Å)" if curve.unit == "angstrom" else "P(r) = r²R² (1/Bohr)")
    ax_curve.set_title(f"径向分布  n={cfg.n}, l={cfg.l}")

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out, dpi=120)
    print(f"[render] 已保存 {out}")


if __name__ == "__main__":
    main()
