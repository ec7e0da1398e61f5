"""特殊函数单元测试

对照 scipy.special 与 sympy 的闭式结果验证递推实现。
"""

import numpy as np
import pytest
import sympy
from scipy.special import eval_genlaguerre, lpmv

from orbitalfield.special import double_factorial, factorial, laguerre, legendre


@pytest.mark.special
@pytest.mark.quick
def test_factorial_small_values():
    assert factorial(0) == 1
    assert factorial(1) == 1
    assert factorial(5) == 120
    # 14! 需精确表示
    assert factorial(14) == 87178291200


@pytest.mark.special
@pytest.mark.quick
def test_double_factorial():
    assert double_factorial(-1) == 1
    assert double_factorial(0) == 1
    assert double_factorial(5) == 15
    assert double_factorial(6) == 48


@pytest.mark.special
@pytest.mark.quick
def test_legendre_zero_when_m_exceeds_l():
    x = np.linspace(-1.0, 1.0, 21)
    for l in range(0, 7):
        for m in range(l + 1, l + 3):
            assert np.all(legendre(l, m, x) == 0.0)
            assert np.all(legendre(l, -m, x) == 0.0)


@pytest.mark.special
@pytest.mark.quick
def test_legendre_closed_forms_low_order():
    x = np.linspace(-1.0, 1.0, 41)
    assert np.allclose(legendre(0, 0, x), 1.0)
    assert np.allclose(legendre(1, 0, x), x)
    # Condon–Shortley 相位：P_1^1 = -sqrt(1-x^2)
    assert np.allclose(legendre(1, 1, x), -np.sqrt(1.0 - x * x))
    assert np.allclose(legendre(2, 0, x), 0.5 * (3.0 * x * x - 1.0))


@pytest.mark.special
def test_legendre_uses_abs_m():
    x = np.linspace(-0.9, 0.9, 7)
    assert np.allclose(legendre(3, -2, x), legendre(3, 2, x))


@pytest.mark.special
def test_legendre_matches_scipy_lpmv():
    """scipy.special.lpmv 同样包含 Condon–Shortley 相位。"""
    x = np.linspace(-1.0, 1.0, 101)
    for l in range(0, 7):
        for m in range(0, l + 1):
            ours = legendre(l, m, x)
            ref = lpmv(m, l, x)
            assert np.allclose(ours, ref, rtol=1e-10, atol=1e-10), f"l={l}, m={m}"


@pytest.mark.special
def test_legendre_matches_sympy_assoc_legendre():
    xs = sympy.Symbol("x")
    for l, m in [(2, 1), (3, 2), (4, 3), (5, 1)]:
        expr = sympy.assoc_legendre(l, m, xs)
        for x in (-0.7, 0.0, 0.3, 0.95):
            ref = float(expr.subs(xs, x))
            assert np.isclose(legendre(l, m, x), ref, rtol=1e-12, atol=1e-12), f"l={l}, m={m}, x={x}"


@pytest.mark.special
def test_legendre_scalar_and_array_types():
    assert isinstance(legendre(2, 1, 0.5), float)
    out = legendre(2, 1, np.zeros((3, 4)))
    assert out.shape == (3, 4)


@pytest.mark.special
@pytest.mark.quick
def test_laguerre_seed_values():
    x = np.linspace(0.0, 10.0, 11)
    for k in (0, 1, 3, 5):
        assert np.allclose(laguerre(0, k, x), 1.0)
        assert np.allclose(laguerre(1, k, x), 1.0 + k - x)


@pytest.mark.special
def test_laguerre_matches_scipy():
    x = np.linspace(0.0, 20.0, 81)
    for n in range(0, 7):
        for k in (1, 3, 5, 7):
            assert np.allclose(laguerre(n, k, x), eval_genlaguerre(n, k, x), rtol=1e-10, atol=1e-8), f"n={n}, k={k}"


@pytest.mark.special
def test_laguerre_negative_order_rejected():
    with pytest.raises(ValueError, match="必须非负"):
        laguerre(-1, 1, 0.5)
