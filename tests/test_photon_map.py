import math
import random

import pytest

from photonmapper.kdtree import Query
from photonmapper.photon_map import Photon, create_photon_map, emit_photon, trace_photon
from photonmapper.scene import EPS, ReflectionType, Scene, Sphere, cornell_box
from photonmapper.vector import Color, Ray, Vec, dot, normalize


def _black_enclosure(*inner: Sphere) -> Scene:
    enclosure = Sphere(100.0, Vec(), Color(), Color(), ReflectionType.DIFFUSE)
    return Scene(spheres=(enclosure, *inner), light_index=0)


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_emitted_ray_leaves_light_surface(seed):
    scene = cornell_box()
    light = scene.light()
    ray, _ = emit_photon(scene, 100, random.Random(seed))
    offset = ray.origin - light.pos
    assert offset.length() == pytest.approx(light.radius + EPS)
    assert ray.direction.length() == pytest.approx(1.0)
    assert dot(ray.direction, normalize(offset)) >= 0.0


def test_emitted_flux_shares_light_power():
    scene = cornell_box()
    light = scene.light()
    count = 250
    _, flux = emit_photon(scene, count, random.Random(7))
    assert flux.x == flux.y == flux.z
    assert flux.x * count / (4.0 * math.pi * light.radius ** 2) == pytest.approx(light.emission.x)


def test_diffuse_black_surface_stores_one_photon():
    scene = _black_enclosure()
    flux = Color(1.0, 2.0, 3.0)
    ray = Ray(Vec(), Vec(0.0, 0.0, 1.0))
    photons = list(trace_photon(scene, ray, flux, random.Random(0)))
    assert len(photons) == 1
    photon = photons[0]
    assert photon.power == flux
    assert photon.incident == ray.direction
    assert photon.pos.z == pytest.approx(100.0)


def test_zero_flux_stores_nothing():
    scene = _black_enclosure()
    ray = Ray(Vec(), Vec(0.0, 0.0, 1.0))
    assert list(trace_photon(scene, ray, Color(), random.Random(0))) == []


def test_ray_missing_everything_stores_nothing():
    scene = Scene(
        spheres=(Sphere(1.0, Vec(0.0, 0.0, 10.0), Color(), Color(0.5, 0.5, 0.5), ReflectionType.DIFFUSE),),
    )
    ray = Ray(Vec(), Vec(0.0, 0.0, -1.0))
    assert list(trace_photon(scene, ray, Color(1.0, 1.0, 1.0), random.Random(0))) == []


@pytest.mark.parametrize("seed", range(6))
def test_white_glass_preserves_flux(seed):
    glass = Sphere(1.0, Vec(0.0, 0.0, 5.0), Color(), Color(1.0, 1.0, 1.0), ReflectionType.REFRACTION)
    scene = _black_enclosure(glass)
    flux = Color(0.5, 0.5, 0.5)
    ray = Ray(Vec(), Vec(0.0, 0.0, 1.0))
    photons = list(trace_photon(scene, ray, flux, random.Random(seed)))
    assert len(photons) == 1
    assert photons[0].power.x == pytest.approx(flux.x)
    assert photons[0].pos.length() == pytest.approx(100.0)


def test_mirror_tints_flux():
    mirror = Sphere(1.0, Vec(0.0, 0.0, 5.0), Color(), Color(0.5, 0.25, 1.0), ReflectionType.SPECULAR)
    scene = _black_enclosure(mirror)
    ray = Ray(Vec(), Vec(0.0, 0.0, 1.0))
    photons = list(trace_photon(scene, ray, Color(1.0, 1.0, 1.0), random.Random(0)))
    assert len(photons) == 1
    assert photons[0].power.x == pytest.approx(0.5)
    assert photons[0].power.y == pytest.approx(0.25)
    assert photons[0].incident.z == pytest.approx(-1.0)


def test_create_photon_map_is_deterministic():
    scene = cornell_box()
    first = create_photon_map(scene, 40, random.Random(11))
    second = create_photon_map(scene, 40, random.Random(11))
    assert len(first) == len(second)
    assert len(first) >= 40


def test_photon_map_photons_lie_on_scene_surfaces():
    scene = cornell_box()
    stored: list[Photon] = []
    rng = random.Random(5)
    for _ in range(30):
        ray, flux = emit_photon(scene, 30, rng)
        stored.extend(trace_photon(scene, ray, flux, rng))
    assert stored
    for photon in stored:
        assert min(p.power.x for p in [photon]) >= 0.0
        gaps = [abs((photon.pos - s.pos).length() - s.radius) for s in scene.spheres]
        assert min(gaps) < 1e-3 * max(1.0, min(s.radius for s in scene.spheres if
                                                abs((photon.pos - s.pos).length() - s.radius) == min(gaps)))


def test_photon_map_supports_search():
    scene = cornell_box()
    photon_map = create_photon_map(scene, 200, random.Random(3))
    floor_point = Vec(50.0, 0.0, 81.6)
    found = photon_map.search_knn(Query(floor_point, Vec(0.0, 1.0, 0.0), 1e4, 5))
    assert 0 < len(found) <= 5
    distances = [n.distance2 for n in found]
    assert distances == sorted(distances)