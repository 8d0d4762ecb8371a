import pytest

from retrotiles.animation import (
    Animation,
    AnimationKind,
    Animator,
    color_cycle,
    color_cycle_blend,
)
from retrotiles.bitmap import Palette, pack_rgb
from retrotiles.sequences import ColorStrip, Sequence, SequenceFrame


def make_palette(values):
    palette = Palette(len(values))
    palette.colors[:] = values
    return palette


def sprite_sequence():
    return Sequence("walk", frames=[SequenceFrame(5, 2), SequenceFrame(7, 3)])


def cycle_sequence(delay=5, count=4):
    return Sequence("water", strips=[ColorStrip(delay=delay, first=0, count=count)], cycle=True)


def test_color_cycle_forward():
    source = make_palette([100, 101, 102, 103, 104])
    target = source.copy()
    color_cycle(source, target, ColorStrip(delay=1, first=1, count=3, pos=1, dir=0))
    assert target.colors == [100, 102, 103, 101, 104]


def test_color_cycle_reverse():
    source = make_palette([100, 101, 102, 103, 104])
    target = source.copy()
    color_cycle(source, target, ColorStrip(delay=1, first=1, count=3, pos=1, dir=1))
    assert target.colors == [100, 103, 101, 102, 104]


@pytest.mark.parametrize("direction", [0, 1])
def test_color_cycle_full_turn_is_identity(direction):
    source = make_palette([1, 2, 3, 4])
    target = make_palette([0, 0, 0, 0])
    color_cycle(source, target, ColorStrip(delay=1, first=0, count=4, pos=4 % 4, dir=direction))
    assert target.colors == source.colors


def test_color_cycle_forward_then_reverse_inverse():
    source = make_palette([10, 20, 30, 40])
    step = make_palette([0] * 4)
    back = make_palette([0] * 4)
    color_cycle(source, step, ColorStrip(first=0, count=4, pos=1, dir=0))
    color_cycle(step, back, ColorStrip(first=0, count=4, pos=1, dir=1))
    assert back.colors == source.colors


def test_blend_endpoints_match_discrete_steps():
    colors = [pack_rgb(255, 0, 0), pack_rgb(0, 255, 0), pack_rgb(0, 0, 255)]
    source = make_palette(colors)
    strip = ColorStrip(delay=10, first=0, count=3, pos=0, t0=0, timer=10)

    at_start = make_palette(list(colors))
    color_cycle_blend(source, at_start, strip, 0)
    assert at_start.colors == colors

    at_end = make_palette(list(colors))
    color_cycle_blend(source, at_end, strip, 10)
    expected = make_palette(list(colors))
    color_cycle(source, expected, ColorStrip(first=0, count=3, pos=1))
    assert at_end.colors == expected.colors


def test_blend_midpoint_between_channels():
    source = make_palette([pack_rgb(200, 0, 0), pack_rgb(0, 200, 0)])
    target = source.copy()
    strip = ColorStrip(delay=10, first=0, count=2, pos=0, t0=0, timer=10)
    color_cycle_blend(source, target, strip, 5)
    r, g, b = target.get_color(0)
    assert 0 < r < 200 and 0 < g < 200 and b == 0
    assert target.colors[0] >> 24 == 0xFF


def test_animation_start_resets_state():
    animation = Animation(pos=3, timer=9, loop=4)
    sequence = sprite_sequence()
    animation.start(sequence, AnimationKind.SPRITE)
    assert (animation.enabled, animation.pos, animation.timer, animation.loop) == (True, 0, 0, 0)
    assert animation.sequence is sequence and animation.kind is AnimationKind.SPRITE


def test_sprite_animation_plays_once():
    shown = []
    animation = Animation(nsprite=3, on_frame=lambda s, i: shown.append((s, i)))
    animation.start(sprite_sequence(), AnimationKind.SPRITE)
    animation.loop = 1
    animation.update(0)
    animation.update(1)
    animation.update(2)
    assert shown == [(3, 5), (3, 7)]
    assert animation.enabled is False


def test_sprite_animation_loops_forever():
    shown = []
    animation = Animation(on_frame=lambda s, i: shown.append(i))
    animation.start(sprite_sequence(), AnimationKind.SPRITE)
    for time in range(0, 20):
        animation.update(time)
    assert animation.enabled is True
    assert shown[:3] == [5, 7, 5]


def test_loop_count_decrements():
    animation = Animation()
    animation.start(sprite_sequence(), AnimationKind.SPRITE)
    animation.loop = 2
    animation.update(0)
    animation.update(2)
    assert animation.loop == 1 and animation.pos == 0 and animation.enabled


def test_tileset_animation_writes_target():
    tiles = [0, 0, 0]
    animation = Animation(tiles=tiles)
    animation.start(Sequence("t", target=2, frames=[SequenceFrame(9, 1)]), AnimationKind.TILESET)
    animation.update(0)
    assert tiles == [0, 0, 9]


def test_animator_palette_cycle_updates_palette():
    palette = make_palette([10, 20, 30, 40])
    animator = Animator(2, 0)
    animator.set_palette_animation(0, palette, cycle_sequence(), False)
    animator.update(0)
    assert palette.colors == [20, 30, 40, 10]
    assert animator.animations[0].srcpalette.colors == [10, 20, 30, 40]
    animator.update(1)
    assert palette.colors == [20, 30, 40, 10]


def test_available_and_disable_palette_animation():
    animator = Animator(2, 0)
    assert animator.available_animation() == 0
    animator.set_palette_animation(0, make_palette([1, 2]), cycle_sequence(count=2), True)
    assert animator.available_animation() == 1
    animator.disable_palette_animation(0)
    assert animator.available_animation() == 0
    assert animator.animations[0].kind is AnimationKind.NONE


def test_palette_animation_source_replaces_colors():
    palette = make_palette([1, 2, 3, 4])
    animator = Animator(1, 0)
    animator.set_palette_animation(0, palette, cycle_sequence(), False)
    animator.set_palette_animation_source(0, make_palette([5, 6, 7, 8]))
    assert palette.colors == [5, 6, 7, 8]
    assert animator.animations[0].srcpalette.colors == [5, 6, 7, 8]


def test_sprite_animation_through_animator():
    shown = []
    animator = Animator(0, 2, on_sprite_frame=lambda s, i: shown.append((s, i)))
    animator.set_sprite_animation(1, sprite_sequence(), 1)
    assert animator.animation_state(1) is True
    animator.update(0)
    animator.update(2)
    assert shown == [(1, 5), (1, 7)]
    assert animator.animation_state(1) is False


def test_disable_sprite_animation():
    animator = Animator(0, 1)
    animator.set_sprite_animation(0, sprite_sequence(), 0)
    animator.disable_sprite_animation(0)
    assert animator.animation_state(0) is False
    assert animator.sprites[0].sequence is None


def test_set_animation_delay_changes_frame():
    animator = Animator(0, 1)
    sequence = sprite_sequence()
    animator.set_sprite_animation(0, sequence, 0)
    animator.set_animation_delay(0, 1, 9)
    assert sequence.frames[1].delay == 9
    with pytest.raises(IndexError):
        animator.set_animation_delay(0, 2, 1)


def test_index_errors():
    animator = Animator(1, 1)
    with pytest.raises(IndexError):
        animator.animation_state(1)
    with pytest.raises(IndexError):
        animator.set_sprite_animation(5, sprite_sequence(), 0)
    with pytest.raises(IndexError):
        animator.disable_palette_animation(1)


def test_type_errors():
    animator = Animator(1, 1)
    with pytest.raises(TypeError):
        animator.set_palette_animation(0, [1, 2], cycle_sequence(), False)
    with pytest.raises(TypeError):
        animator.set_sprite_animation(0, "walk", 0)


def test_source_without_palette_raises():
    animator = Animator(1, 0)
    with pytest.raises(ValueError):
        animator.set_palette_animation_source(0, make_palette([1]))