import pytest

from retrotiles.actors import Actor, ActorPool, Rect


class RecordingSprites:
    def __init__(self):
        self.calls = []

    def set_position(self, index, x, y):
        self.calls.append(("position", index, x, y))

    def disable(self, index):
        self.calls.append(("disable", index))

    def clear_blend(self, index):
        self.calls.append(("blend", index))


def make_actor(x, y, w, h):
    actor = Actor(x=x, y=y, w=w, h=h)
    actor.update_hitbox()
    return actor


def test_hitbox_follows_position_and_size():
    x, y, w, h = 10, 20, 32, 16
    actor = make_actor(x, y, w, h)
    assert actor.hitbox == Rect(x, y, x + w, y + h)


def test_overlap_collides_both_ways():
    a = make_actor(0, 0, 10, 10)
    b = make_actor(5, 5, 10, 10)
    assert a.collides(b)
    assert b.collides(a)


def test_touching_edges_do_not_collide():
    a = make_actor(0, 0, 10, 10)
    b = make_actor(10, 0, 10, 10)
    assert not a.collides(b)


def test_disjoint_do_not_collide():
    a = make_actor(0, 0, 4, 4)
    b = make_actor(0, 50, 4, 4)
    assert not a.collides(b)


def test_available_finds_first_free():
    pool = ActorPool(8)
    pool.spawn(2, 1, 0, 0, 1, 1)
    assert pool.available(2, 4) == 3
    assert pool.available(0, 8) == 0


def test_available_none_when_all_used():
    pool = ActorPool(3)
    for index in range(3):
        pool.spawn(index, 1, 0, 0, 1, 1)
    assert pool.available(0, 3) is None


def test_get_out_of_range():
    pool = ActorPool(2)
    assert pool.get(2) is None
    assert pool.get(1) is pool.actors[1]


def test_spawn_sets_fields():
    pool = ActorPool(4)
    actor = pool.spawn(1, 5, 7, 9, 3, 4)
    assert actor is pool.get(1)
    assert (actor.index, actor.type, actor.state) == (1, 5, 1)
    assert actor.hitbox == Rect(7, 9, 7 + 3, 9 + 4)


def test_spawn_out_of_range():
    assert ActorPool(2).spawn(5, 1, 0, 0, 1, 1) is None


def test_tasks_move_actor_and_sprite():
    sprites = RecordingSprites()
    pool = ActorPool(2, sprites)
    actor = pool.spawn(0, 1, 10, 10, 4, 4)
    actor.vx, actor.vy = 2, -1
    pool.tasks(1)
    assert (actor.x, actor.y) == (12, 9)
    assert actor.hitbox.x1 == actor.x and actor.hitbox.y1 == actor.y
    assert sprites.calls == [("position", 0, 12, 9)]


def test_inactive_actors_are_not_ticked():
    pool = ActorPool(2)
    actor = pool.get(1)
    actor.vx = 5
    pool.tasks(1)
    assert actor.x == 0


def test_callback_release_disables_sprite():
    sprites = RecordingSprites()
    pool = ActorPool(2, sprites)
    pool.spawn(1, 1, 0, 0, 4, 4, callback=pool.release)
    pool.tasks(3)
    assert pool.get(1).state == 0
    assert sprites.calls == [("blend", 1), ("disable", 1)]
    assert pool.available(0, 2) == 0


def test_timeouts():
    pool = ActorPool(1)
    actor = pool.spawn(0, 1, 0, 0, 1, 1)
    pool.tasks(100)
    pool.set_timeout(actor, 2, 10)
    assert not pool.timeout_expired(actor, 2)
    pool.tasks(109)
    assert not pool.timeout_expired(actor, 2)
    pool.tasks(110)
    assert pool.timeout_expired(actor, 2)


def test_fresh_timers_are_expired():
    pool = ActorPool(1)
    actor = pool.spawn(0, 1, 0, 0, 1, 1)
    assert all(pool.timeout_expired(actor, timer) for timer in range(len(actor.timers)))


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        ActorPool(-1)