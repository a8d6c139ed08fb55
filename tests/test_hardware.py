import pytest

from farmsim.catalog import build_catalog
from farmsim.effects import Numeric, Categorical
from farmsim.hardware import Device, DeviceRegistry, CostLine


def custom_catalog():
    """Small catalog exercising global coverage, categorical effects and a missing coverage."""
    base = {'cost': 100, 'operating_cost': 1, 'power_usage': 10, 'durability': 90,
            'maintenance_interval': 30, 'unlock_level': 1, 'category': 'misc'}
    cfg = {'equipment': {
        'sun_lamp': dict(base, coverage=999, effects={'light': 10}),
        'mister': dict(base, coverage=6, effects={'humidity': 20}),
        'mode_switch': dict(base, coverage=6, effects={'humidity': 'auto'}),
        'spot_heater': dict(base, effects={'temperature': 4}),
    }}
    return build_catalog(cfg)


# -------------------------
# Device

def test_effective_output_full_strength():
    d = Device('led_light', 0, 0)
    out = d.effective_output()
    assert out['light'] == Numeric(40.0)
    assert out['temperature'] == Numeric(2.0)


def test_effective_output_empty_when_off_or_broken():
    d = Device('led_light', 0, 0)
    d.set_active(False)
    assert d.effective_output() == {}
    d.set_active(True)
    d.durability = 0.0
    assert d.effective_output() == {}


def test_effective_output_scales_with_durability_and_level():
    d = Device('led_light', 0, 0)
    d.level = 3
    d.durability = 50.0
    assert d.effective_output()['light'].delta == pytest.approx(40 * 0.5 * 1.3)

    previous = 0.0
    for durability in (10.0, 40.0, 70.0, 100.0):
        d.durability = durability
        light = d.effective_output()['light'].delta
        assert light > previous
        previous = light


def test_categorical_effect_is_not_scaled():
    d = Device('mode_switch', 0, 0, catalog=custom_catalog())
    d.durability = 30.0
    assert d.effective_output()['humidity'] == Categorical('auto')


def test_high_rating_wears_slowly():
    d = Device('led_light', 0, 0)  # rating 90
    for day in range(1, 11):
        d.advance_day(day)
    assert d.durability == pytest.approx(95.0)
    assert d.total_operating_hours == 240


def test_low_rating_wears_fast():
    d = Device('hps_light', 0, 0)  # rating 60
    ac = Device('air_conditioner', 0, 0)  # rating 80 is not above 80
    for day in range(1, 11):
        d.advance_day(day)
        ac.advance_day(day)
    assert d.durability == pytest.approx(90.0)
    assert ac.durability == pytest.approx(90.0)


def test_durability_floors_at_zero():
    d = Device('hps_light', 0, 0)
    d.durability = 0.5
    d.advance_day(1)
    assert d.durability == 0.0


def test_inactive_device_does_not_age_or_cost():
    d = Device('heater', 0, 0)
    d.set_active(False)
    usage = d.advance_day(1)
    assert usage.operating_cost == 0.0
    assert usage.power_usage == 0.0
    assert d.durability == 100.0
    assert d.total_operating_hours == 0


def test_daily_usage_reports_cost_and_power():
    usage = Device('heater', 0, 0).advance_day(1)
    assert usage.operating_cost == 8
    assert usage.power_usage == 500


def test_maintenance_due_and_performed():
    d = Device('heater', 0, 0)  # interval 45
    d.advance_day(44)
    assert not d.maintenance_due
    d.advance_day(45)
    assert d.maintenance_due
    assert d.status() == 'maintenance_required'

    res = d.perform_maintenance(45)
    assert res.success
    assert res.cost == 10
    assert not d.maintenance_due
    assert d.last_maintenance_day == 45
    assert d.durability == 100.0


def test_maintenance_restores_durability():
    d = Device('hps_light', 0, 0)
    d.durability = 50.0
    d.perform_maintenance(3)
    assert d.durability == pytest.approx(70.0)


def test_upgrade_costs_and_cap():
    d = Device('led_light', 0, 0)
    d.durability = 95.0
    costs = []
    for expected_level in (2, 3, 4, 5):
        res = d.upgrade()
        assert res.success
        assert d.level == expected_level
        assert d.durability <= 100.0
        costs.append(res.cost)
    assert costs == [100, 200, 300, 400]

    res = d.upgrade()
    assert not res.success
    assert 'maximum level' in res.message
    assert d.level == 5


def test_toggle_and_status():
    d = Device('led_light', 0, 0)
    assert d.status() == 'operational'
    res = d.toggle()
    assert res.success and not d.active
    assert d.status() == 'inactive'
    d.toggle()
    d.durability = 20.0
    assert d.status() == 'poor_condition'
    d.durability = 0.0
    assert d.status() == 'broken'


def test_unknown_device_type_raises():
    with pytest.raises(KeyError):
        Device('flux_capacitor', 0, 0)


def test_device_rehydration():
    d = Device('co2_generator', 2, 3)
    d.upgrade()
    d.advance_day(30)
    restored = Device.from_state(d.to_state())
    assert restored.to_state() == d.to_state()
    assert restored.spec is d.spec


# -------------------------
# DeviceRegistry

def test_install_and_occupied_slot():
    reg = DeviceRegistry()
    res = reg.install('led_light', 1, 1, unlock_level=1)
    assert res.success and res.cost == 200
    first = reg.get(1, 1)

    res = reg.install('ventilation_fan', 1, 1, unlock_level=1)
    assert not res.success
    assert reg.get(1, 1) is first
    assert len(reg) == 1


def test_install_requires_unlock_level():
    reg = DeviceRegistry()
    assert not reg.install('heater', 0, 0, unlock_level=1).success
    assert not reg.install('flux_capacitor', 0, 0, unlock_level=10).success
    assert len(reg) == 0
    assert reg.install('heater', 0, 0, unlock_level=2).success


def test_remove_and_refund():
    reg = DeviceRegistry()
    assert not reg.remove(0, 0).success

    reg.install('led_light', 0, 0)
    for day in range(1, 11):
        reg.advance_day(day)
    res = reg.remove(0, 0)
    assert res.success
    assert res.refund == 57  # floor(200 * 0.3 * 0.95)
    assert reg.get(0, 0) is None


def test_effects_weighted_by_distance():
    reg = DeviceRegistry()
    reg.install('hps_light', 0, 0, unlock_level=3)  # coverage 6
    eff = reg.effects_near((3, 0))
    assert eff.light == pytest.approx(50 * 0.5)
    assert eff.temperature == pytest.approx(8 * 0.5)

    # at the edge the weight bottoms out at 0.3
    assert reg.effects_near((6, 0)).light == pytest.approx(50 * 0.3)
    # outside coverage
    assert reg.effects_near((10, 0)).light == 0.0


def test_effects_sum_across_devices():
    reg = DeviceRegistry()
    reg.install('led_light', 0, 0)
    reg.install('led_light', 2, 0)
    eff = reg.effects_near((1, 0))
    assert eff.light == pytest.approx(2 * 40 * 0.75)
    assert eff.temperature == pytest.approx(2 * 2 * 0.75)


def test_efficiency_defaults_and_hydroponics():
    reg = DeviceRegistry()
    eff = reg.effects_near((0, 0))
    assert eff.nutrient_efficiency == 1.0
    assert eff.water_efficiency == 1.0

    reg.install('hydroponic_system', 0, 0, unlock_level=5)
    eff = reg.effects_near((0, 0))
    assert eff.nutrient_efficiency == pytest.approx(3.0)
    assert eff.water_efficiency == pytest.approx(2.5)
    # 'growth' is not a tracked key
    assert eff.get('growth') is None


def test_global_device_applies_everywhere_at_full_strength():
    reg = DeviceRegistry(catalog=custom_catalog())
    reg.install('sun_lamp', 0, 0)
    assert reg.effects_near((50, 50)).light == pytest.approx(10.0)


def test_categorical_effect_overwrites():
    reg = DeviceRegistry(catalog=custom_catalog())
    reg.install('mister', 0, 0)
    reg.install('mode_switch', 1, 0)
    eff = reg.effects_near((0, 0))
    assert eff.get('humidity') == Categorical('auto')
    assert eff.as_dict()['humidity'] == 'auto'
    # categorical entries contribute nothing to the numeric reading
    assert eff.humidity == 0.0


def test_default_radius_for_specs_without_coverage():
    reg = DeviceRegistry(catalog=custom_catalog(), default_radius=2.0)
    reg.install('spot_heater', 0, 0)
    assert reg.effects_near((1, 0)).temperature == pytest.approx(4 * 0.5)
    assert reg.effects_near((3, 0)).temperature == 0.0
    assert reg.effects_near((3, 0), default_radius=4.0).temperature == pytest.approx(4 * 0.3)


def test_registry_advance_day_totals():
    reg = DeviceRegistry()
    reg.install('led_light', 0, 0)
    reg.install('heater', 5, 5, unlock_level=2)
    upkeep = reg.advance_day(1)
    assert upkeep.operating_cost == pytest.approx(23.0)
    assert upkeep.power_usage == pytest.approx(600.0)
    assert upkeep.breakdown == [CostLine('led_light', 15.0), CostLine('heater', 8.0)]
    assert reg.total_power_usage == pytest.approx(600.0)

    reg.get(5, 5).set_active(False)
    upkeep = reg.advance_day(2)
    assert upkeep.operating_cost == pytest.approx(15.0)
    assert upkeep.power_usage == pytest.approx(100.0)


def test_list_all_and_shop():
    reg = DeviceRegistry()
    reg.install('ventilation_fan', 3, 2)
    listing = reg.list_all()
    assert listing[0]['x'] == 3 and listing[0]['y'] == 2
    assert listing[0]['type'] == 'ventilation_fan'

    shop = {item['type'] for item in reg.shop_inventory(1)}
    assert shop == {'led_light', 'ventilation_fan'}
    assert len(reg.shop_inventory(7)) == 12


def test_contains_and_iteration():
    reg = DeviceRegistry()
    reg.install('led_light', 0, 0)
    reg.install('ventilation_fan', 3, 2)
    assert (0, 0) in reg
    assert (3, 2) in reg
    assert (1, 1) not in reg
    assert sorted(d.type for d in reg) == ['led_light', 'ventilation_fan']


def test_registry_rehydration():
    reg = DeviceRegistry()
    reg.install('led_light', 0, 0)
    reg.install('co2_generator', 4, 1, unlock_level=5)
    reg.get(0, 0).upgrade()
    reg.advance_day(10)

    restored = DeviceRegistry.from_state(reg.to_state())
    assert len(restored) == 2
    assert restored.to_state() == reg.to_state()
    assert restored.effects_near((1, 0)).as_dict() == reg.effects_near((1, 0)).as_dict()


def test_restore_rejects_occupied_slot():
    reg = DeviceRegistry()
    reg.restore(Device('led_light', 2, 2))
    with pytest.raises(ValueError):
        reg.restore(Device('ventilation_fan', 2, 2))
    assert reg.get(2, 2).type == 'led_light'


def test_details_report_catalog_costs():
    d = Device('led_light', 0, 0)
    info = d.details()
    assert info['installation_cost'] == d.installation_cost == 200
    assert info['daily_operating_cost'] == d.daily_operating_cost == d.spec.operating_cost
