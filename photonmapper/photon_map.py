"""Photon emission, tracing and photon-map construction."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterator

from .kdtree import KDTree
from .scene import EPS, ReflectionType, Scene
from .vector import Color, Ray, Vec, dot, multiply, normalize, orthonormal_basis

log = logging.getLogger(__name__)

_N_VACUUM = 1.0
_N_GLASS = 1.5


@dataclass(frozen=True)
class Photon:
    """A photon stored on a diffuse surface."""

    pos: Vec
    power: Color
    incident: Vec


def _cosine_direction(w: Vec, rng: random.Random) -> Vec:
    u, v, w = orthonormal_basis(w)
    r1 = 2.0 * math.pi * rng.random()
    r2 = rng.random()
    r2s = math.sqrt(r2)
    return normalize(u * (math.cos(r1) * r2s) + v * (math.sin(r1) * r2s) + w * math.sqrt(1.0 - r2))


def emit_photon(scene: Scene, photon_count: int, rng: random.Random) -> tuple[Ray, Color]:
    """Sample a ray leaving the light and the flux each of ``photon_count`` photons carries."""
    light = scene.light()
    r1 = 2.0 * math.pi * rng.random()
    r2 = 1.0 - 2.0 * rng.random()
    s = math.sqrt(1.0 - r2 * r2)
    on_sphere = Vec(s * math.cos(r1), s * math.sin(r1), r2)
    light_pos = light.pos + on_sphere * (light.radius + EPS)
    normal = normalize(light_pos - light.pos)
    direction = _cosine_direction(normal, rng)
    flux = light.emission * (4.0 * math.pi * light.radius ** 2.0) / photon_count
    return Ray(light_pos, direction), flux


def trace_photon(scene: Scene, ray: Ray, flux: Color, rng: random.Random) -> Iterator[Photon]:
    """Follow one photon through the scene, yielding each photon stored on a diffuse hit."""
    while flux.max_component() > 0.0:
        hit = scene.intersect(ray)
        if hit is None:
            return
        obj = hit.sphere
        hitpoint = ray.origin + ray.direction * hit.distance
        normal = normalize(hitpoint - obj.pos)
        orienting = normal if dot(normal, ray.direction) < 0.0 else -normal
        reflected = Ray(hitpoint, ray.direction - normal * (2.0 * dot(normal, ray.direction)))

        if obj.ref_type is ReflectionType.DIFFUSE:
            yield Photon(hitpoint, flux, ray.direction)
            probability = (obj.color.x + obj.color.y + obj.color.z) / 3
            if probability <= rng.random():
                return
            ray = Ray(hitpoint, _cosine_direction(orienting, rng))
            flux = multiply(flux, obj.color) / probability

        elif obj.ref_type is ReflectionType.SPECULAR:
            ray = reflected
            flux = multiply(flux, obj.color)

        else:
            into = dot(normal, orienting) > 0.0
            nnt = _N_VACUUM / _N_GLASS if into else _N_GLASS / _N_VACUUM
            ddn = dot(ray.direction, orienting)
            cos2t = 1.0 - nnt * nnt * (1.0 - ddn * ddn)
            if cos2t < 0.0:
                ray = reflected
                flux = multiply(flux, obj.color)
                continue
            sign = 1.0 if into else -1.0
            tdir = normalize(ray.direction * nnt - normal * (sign * (ddn * nnt + math.sqrt(cos2t))))
            a = _N_GLASS - _N_VACUUM
            b = _N_GLASS + _N_VACUUM
            r0 = (a * a) / (b * b)
            c = 1.0 - (-ddn if into else dot(tdir, normal))
            re = r0 + (1.0 - r0) * c ** 5.0
            probability = re
            if rng.random() < probability:
                ray = reflected
                flux = multiply(flux, obj.color) * re / probability
            else:
                ray = Ray(hitpoint, tdir)
                flux = multiply(flux, obj.color)


def create_photon_map(scene: Scene, photon_count: int, rng: random.Random) -> KDTree[Photon]:
    """Shoot ``photon_count`` photons from the light and index the stored ones."""
    log.info("Shooting photons... (%d photons)", photon_count)
    photon_map: KDTree[Photon] = KDTree()
    for _ in range(photon_count):
        ray, flux = emit_photon(scene, photon_count, rng)
        for photon in trace_photon(scene, ray, flux, rng):
            photon_map.add_point(photon)
    log.info("Done. (%d photons are stored)", len(photon_map))
    log.info("Creating KD-tree...")
    photon_map.build()
    log.info("Done.")
    return photon_map