import pytest

from arcade_loop.components import HAZARD
from arcade_loop.main import build_parser, main
from arcade_loop.variants import (
    VARIANTS, DODGE, DASH, CATCH, get_variant,
    VariantConfig, PlayerConfig, SpawnClass, DifficultyCurve, seconds
)


def test_three_games_registered():
    assert sorted(VARIANTS) == ['catch', 'dash', 'dodge']
    assert get_variant('DASH') is DASH
    with pytest.raises(KeyError):
        get_variant('pong')


def test_dodge_tuning():
    block = DODGE.spawn_class('block')
    assert block.width == (60, 160)
    assert block.vy == (2.0, 3.2)
    assert block.interval(1.0) == seconds(0.9)
    assert block.bonus.threshold == 2.2
    assert DODGE.difficulty.speed_at(0) == 1.0
    assert DODGE.difficulty.speed_at(seconds(25)) == 2.0
    assert DODGE.player.friction == 0.92


def test_dash_constants_are_configurable():
    assert DASH.player.dash_multiplier == 2.2
    assert DASH.extra_life_every == 500
    assert DASH.max_lives > DASH.lives


def test_catch_counts_misses():
    assert CATCH.damage_mode == 'misses'
    assert CATCH.spawn_class('fruit').on_exit == 'miss'
    assert CATCH.player.direct


def test_stepped_curve_caps_level():
    curve = DifficultyCurve(mode='stepped', level_interval=10, max_level=4,
                            speed_per_level=0.25)
    assert [curve.level_at(t) for t in (0, 9.9, 10, 25, 1000)] == [1, 1, 2, 3, 4]
    assert curve.speed_at(1000) == 1.75


@pytest.mark.parametrize('kwargs', [
    dict(base_interval=10, min_interval=20),
    dict(min_interval=0),
    dict(interval_slope=-1),
    dict(shape='hexagon'),
    dict(variant='boss'),
    dict(on_exit='explode'),
    dict(vy=(3, 1)),
])
def test_bad_spawn_class_rejected(kwargs):
    options = dict(kind='x', variant=HAZARD)
    options.update(kwargs)
    with pytest.raises(ValueError):
        SpawnClass(**options)


@pytest.mark.parametrize('kwargs', [
    dict(width=0),
    dict(player=PlayerConfig(width=900)),
    dict(lives=0),
    dict(lives=4, max_lives=3),
    dict(damage_mode='health'),
    dict(slow_factor=0),
    dict(spawn_classes=(SpawnClass(kind='a', variant=HAZARD),
                        SpawnClass(kind='a', variant=HAZARD))),
])
def test_bad_variant_rejected(kwargs):
    with pytest.raises(ValueError):
        VariantConfig(name='bad', title='Bad', **kwargs)


def test_unknown_spawn_class_lookup():
    with pytest.raises(KeyError):
        DODGE.spawn_class('meteor')


def test_cli_arguments():
    args = build_parser().parse_args(['catch', '--seed', '3', '--show-fps'])
    assert args.variant == 'catch'
    assert args.seed == 3
    assert args.show_fps
    assert build_parser().parse_args([]).variant == 'dodge'


def test_cli_rejects_unknown_game(capsys):
    with pytest.raises(SystemExit):
        main(['pong'])
    assert 'unknown game' in capsys.readouterr().err
