import pytest

from photonmapper.scene import (
    Hit,
    ReflectionType,
    Scene,
    Sphere,
    cornell_box,
)
from photonmapper.vector import Color, Ray, Vec, normalize

UNIT = Sphere(2.0, Vec(0.0, 0.0, 10.0), Color(), Color(0.5, 0.5, 0.5), ReflectionType.DIFFUSE)


def _point(ray, t):
    return ray.origin + ray.direction * t


def test_sphere_hit_lies_on_surface():
    ray = Ray(Vec(), Vec(0.0, 0.0, 1.0))
    t = UNIT.intersect(ray)
    assert t > 0.0
    assert (_point(ray, t) - UNIT.pos).length() == pytest.approx(UNIT.radius)


def test_sphere_returns_near_side_from_outside():
    ray = Ray(Vec(), Vec(0.0, 0.0, 1.0))
    t = UNIT.intersect(ray)
    assert t < (UNIT.pos - ray.origin).length()


def test_sphere_miss_returns_zero():
    ray = Ray(Vec(), Vec(1.0, 0.0, 0.0))
    assert UNIT.intersect(ray) == 0.0


def test_sphere_from_inside_returns_far_side():
    ray = Ray(UNIT.pos, normalize(Vec(1.0, 1.0, 0.0)))
    t = UNIT.intersect(ray)
    assert t == pytest.approx(UNIT.radius)


def test_sphere_behind_ray_gives_negative():
    ray = Ray(Vec(), Vec(0.0, 0.0, -1.0))
    assert UNIT.intersect(ray) < 0.0


def test_scene_miss_returns_none():
    scene = Scene(spheres=(UNIT,))
    assert scene.intersect(Ray(Vec(), Vec(0.0, 1.0, 0.0))) is None


def test_empty_scene_has_no_hits():
    assert Scene(spheres=()).intersect(Ray(Vec(), Vec(0.0, 0.0, 1.0))) is None


def test_scene_picks_nearest():
    far = Sphere(1.0, Vec(0.0, 0.0, 30.0), Color(), Color(), ReflectionType.SPECULAR)
    scene = Scene(spheres=(far, UNIT))
    hit = scene.intersect(Ray(Vec(), Vec(0.0, 0.0, 1.0)))
    assert isinstance(hit, Hit)
    assert hit.index == 1
    assert hit.sphere is UNIT
    assert hit.distance == pytest.approx(UNIT.intersect(Ray(Vec(), Vec(0.0, 0.0, 1.0))))


def test_cornell_box_layout():
    scene = cornell_box()
    assert len(scene.spheres) == 9
    assert scene.light() is scene.spheres[0]
    assert scene.light().emission == Color(12, 12, 12)
    assert scene.spheres[7].ref_type is ReflectionType.SPECULAR
    assert scene.spheres[8].ref_type is ReflectionType.REFRACTION


def test_cornell_box_left_and_right_walls():
    scene = cornell_box()
    origin = Vec(50.0, 40.0, 80.0)
    left = scene.intersect(Ray(origin, Vec(-1.0, 0.0, 0.0)))
    right = scene.intersect(Ray(origin, Vec(1.0, 0.0, 0.0)))
    assert left.index == 1
    assert right.index == 2
    assert left.distance == pytest.approx(49.0, rel=1e-3)
    assert right.distance == pytest.approx(49.0, rel=1e-3)


def test_cornell_box_light_above():
    scene = cornell_box()
    hit = scene.intersect(Ray(Vec(50.0, 40.0, 81.6), Vec(0.0, 1.0, 0.0)))
    assert hit.index == scene.light_index
    assert hit.sphere.emission.max_component() > 0.0