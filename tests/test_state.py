import pytest

from orbitalfield.state import (
    HybridSpec,
    InvalidHybridIndex,
    InvalidQuantumState,
    OrbitalConfig,
    QuantumState,
    orbital_label,
)


@pytest.mark.state
@pytest.mark.quick
def test_quantum_state_validation():
    assert QuantumState(3, 2, -2).validate() == QuantumState(3, 2, -2)
    for n, l, m in [(0, 0, 0), (2, 2, 0), (3, 1, 2), (2, -1, 0)]:
        with pytest.raises(InvalidQuantumState):
            QuantumState(n, l, m).validate()
    with pytest.raises(InvalidQuantumState, match="整数"):
        QuantumState(2.0, 1, 0).validate()


@pytest.mark.state
@pytest.mark.quick
def test_defaults_match_initial_ui_state():
    cfg = OrbitalConfig()
    assert (cfg.n, cfg.l, cfg.m) == (3, 2, 0)
    assert cfg.orbital_type == "complex"
    assert (cfg.hybrid_type, cfg.hybrid_index) == ("sp3", 0)
    assert cfg.quality == 64 and cfg.opacity == 0.5
    assert cfg.visualization_mode == "cloud"
    assert cfg.validate() is cfg


@pytest.mark.state
@pytest.mark.quick
def test_with_n_cascades_clamping():
    cfg = OrbitalConfig(n=4, l=3, m=-3)
    down = cfg.with_n(2)
    assert (down.n, down.l, down.m) == (2, 1, -1)
    assert cfg.n == 4  # 原对象不变
    assert cfg.with_n(0).n == 1
    assert cfg.with_n(0).l == 0 and cfg.with_n(0).m == 0


@pytest.mark.state
def test_with_l_and_m_clamp():
    cfg = OrbitalConfig(n=3, l=2, m=2)
    assert cfg.with_l(5).l == 2
    lowered = cfg.with_l(1)
    assert (lowered.l, lowered.m) == (1, 1)
    assert cfg.with_l(-3).l == 0
    assert cfg.with_m(7).m == 2
    assert cfg.with_m(-7).m == -2


@pytest.mark.state
def test_hybrid_transitions():
    cfg = OrbitalConfig().with_orbital_type("hybrid").with_hybrid_index(3)
    assert cfg.hybrid_index == 3
    switched = cfg.with_hybrid_type("sp")
    assert switched.hybrid_index == 0
    with pytest.raises(InvalidHybridIndex):
        switched.with_hybrid_index(2)
    with pytest.raises(InvalidHybridIndex):
        cfg.with_hybrid_type("sp4")
    assert HybridSpec("sp2", 2).validate().count == 3


@pytest.mark.state
def test_invalid_settings_rejected():
    cfg = OrbitalConfig()
    with pytest.raises(ValueError):
        cfg.with_opacity(0.0)
    with pytest.raises(ValueError):
        cfg.with_quality(1)
    with pytest.raises(ValueError):
        cfg.with_visualization_mode("wireframe")
    with pytest.raises(ValueError):
        cfg.with_orbital_type("spinor")
    with pytest.raises(InvalidQuantumState):
        OrbitalConfig(n=2, l=2).validate()
    with pytest.raises(InvalidHybridIndex):
        OrbitalConfig(orbital_type="hybrid", hybrid_type="sp", hybrid_index=2).validate()


@pytest.mark.state
def test_effective_n_for_hybrid():
    assert OrbitalConfig(n=5, l=0, m=0).effective_n == 5
    assert OrbitalConfig(n=5, l=0, m=0, orbital_type="hybrid").effective_n == 2


@pytest.mark.state
@pytest.mark.quick
@pytest.mark.parametrize(
    "kwargs, label",
    [
        (dict(n=1, l=0, m=0), "1s"),
        (dict(n=2, l=1, m=1, orbital_type="real"), "2p_x"),
        (dict(n=2, l=1, m=-1, orbital_type="real"), "2p_y"),
        (dict(n=3, l=2, m=0, orbital_type="real"), "3d_z²"),
        (dict(n=3, l=2, m=-2, orbital_type="real"), "3d_xy"),
        (dict(n=3, l=2, m=2, orbital_type="complex"), "3d_+2"),
        (dict(n=4, l=3, m=-2, orbital_type="real"), "4f_-2"),
        (dict(orbital_type="hybrid", hybrid_type="sp3", hybrid_index=0), "sp3_1"),
    ],
)
def test_orbital_label(kwargs, label):
    assert orbital_label(OrbitalConfig(**kwargs)) == label
