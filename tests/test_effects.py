from farmsim.effects import Numeric, Categorical, EnvironmentEffect, tag_effect
from farmsim.environment import EnvironmentReading


def test_tagging():
    assert tag_effect(3) == Numeric(3.0)
    assert tag_effect(-1.5) == Numeric(-1.5)
    assert tag_effect('auto') == Categorical('auto')
    assert tag_effect(True) == Categorical(True)


def test_unknown_keys_ignored():
    eff = EnvironmentEffect()
    eff.merge('security', Numeric(80.0))
    assert eff.get('security') is None
    assert 'security' not in eff.as_dict()


def test_numeric_after_categorical_replaces_it():
    eff = EnvironmentEffect()
    eff.merge('humidity', Categorical('auto'))
    eff.merge('humidity', Numeric(10.0), weight=0.5)
    assert eff.get('humidity') == Numeric(5.0)


def test_reading_with_effect():
    eff = EnvironmentEffect()
    eff.merge('temperature', Numeric(4.0))
    eff.merge('co2', Numeric(300.0), weight=0.5)
    eff.merge('nutrient_efficiency', Numeric(2.0))
    reading = EnvironmentReading().with_effect(eff)
    assert reading.temperature == 76.0
    assert reading.co2 == 550.0
    assert reading.humidity == 45.0
    assert reading.ph == 6.5
