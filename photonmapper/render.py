"""Radiance estimation from a photon map and the image renderer."""

from __future__ import annotations

import argparse
import logging
import math
import random
from dataclasses import dataclass
from typing import Sequence

from .hdr import save_hdr
from .kdtree import KDTree, Query
from .photon_map import Photon, create_photon_map
from .scene import ReflectionType, Scene, cornell_box
from .vector import Color, Ray, Vec, cross, dot, multiply, normalize

log = logging.getLogger(__name__)

BACKGROUND_COLOR = Color(0.0, 0.0, 0.0)
MAX_DEPTH = 5
_N_VACUUM = 1.0
_N_GLASS = 1.5
_CONE_FILTER_K = 1.1
_START_DEPTH = 3
_SUBSAMPLES = 2
_CAMERA_DISTANCE = 130.0


@dataclass(frozen=True)
class RenderSettings:
    """Image size, photon budget and gathering parameters."""

    width: int = 640
    height: int = 480
    photon_num: int = 50000
    gather_radius: float = 32.0
    gather_max_photon_num: int = 3
    output: str = "image.hdr"
    seed: int = 1

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("image dimensions must be positive")
        if self.photon_num <= 0:
            raise ValueError("photon_num must be positive")
        if self.gather_max_photon_num <= 0:
            raise ValueError("gather_max_photon_num must be positive")


def _estimate_diffuse(
    obj_color: Color,
    hitpoint: Vec,
    orienting: Vec,
    photon_map: KDTree[Photon],
    gather_radius: float,
    gather_max_photon_num: int,
) -> tuple[Color, float] | None:
    """Return the cone-filtered flux and squared gathering radius, or None."""
    neighbors = photon_map.search_knn(
        Query(hitpoint, orienting, gather_radius, gather_max_photon_num)
    )
    if not neighbors:
        return None
    max_distance2 = max(n.distance2 for n in neighbors)
    if max_distance2 <= 0.0:
        return None
    max_distance = math.sqrt(max_distance2)
    flux = Color()
    for neighbor in neighbors:
        weight = 1.0 - math.sqrt(neighbor.distance2) / (_CONE_FILTER_K * max_distance)
        flux = flux + multiply(obj_color, neighbor.point.power) / math.pi * weight
    flux = flux / (1.0 - 2.0 / (3.0 * _CONE_FILTER_K))
    return flux, max_distance2


def radiance(
    ray: Ray,
    depth: int,
    scene: Scene,
    photon_map: KDTree[Photon],
    gather_radius: float,
    gather_max_photon_num: int,
    rng: random.Random,
) -> Color:
    """Radiance arriving along ``ray``, estimated from ``photon_map``."""
    hit = scene.intersect(ray)
    if hit is None:
        return BACKGROUND_COLOR
    obj = hit.sphere
    hitpoint = ray.origin + ray.direction * hit.distance
    normal = normalize(hitpoint - obj.pos)
    orienting = normal if dot(normal, ray.direction) > 0 else -normal

    roulette = obj.color.max_component()
    if depth > MAX_DEPTH:
        if rng.random() >= roulette:
            return obj.emission
    else:
        roulette = 1.0

    def trace(next_ray: Ray) -> Color:
        return radiance(
            next_ray, depth + 1, scene, photon_map,
            gather_radius, gather_max_photon_num, rng,
        )

    reflection_ray = Ray(hitpoint, ray.direction - normal * (2.0 * dot(normal, ray.direction)))

    if obj.ref_type is ReflectionType.DIFFUSE:
        estimate = _estimate_diffuse(
            obj.color, hitpoint, orienting, photon_map,
            gather_radius, gather_max_photon_num,
        )
        if estimate is None:
            return Color()
        flux, max_distance2 = estimate
        return obj.emission + flux / (math.pi * max_distance2) / roulette

    if obj.ref_type is ReflectionType.SPECULAR:
        return obj.emission + trace(reflection_ray)

    into = dot(normal, orienting) > 0.0
    nnt = _N_VACUUM / _N_GLASS if into else _N_GLASS / _N_VACUUM
    ddn = dot(ray.direction, orienting)
    cos2t = 1.0 - nnt * nnt * (1.0 - ddn * ddn)
    if cos2t < 0.0:
        return obj.emission + multiply(obj.color, trace(reflection_ray))

    sign = 1.0 if into else -1.0
    tdir = normalize(ray.direction * nnt - normal * (sign * (ddn * nnt + math.sqrt(cos2t))))

    # Schlick's approximation of the Fresnel reflectance.
    a = _N_GLASS - _N_VACUUM
    b = _N_GLASS + _N_VACUUM
    r0 = (a * a) / (b * b)
    c = 1.0 - (-ddn if into else dot(tdir, normal))
    re = r0 + (1.0 - r0) * c ** 5.0
    tr = 1.0 - re
    probability = 0.25 + 0.5 * re

    if depth > 2:
        if rng.random() < probability:
            return obj.emission + multiply(obj.color, trace(reflection_ray) * re) / probability / roulette
        return obj.emission + multiply(obj.color, trace(reflection_ray) * tr) / (1.0 - probability) / roulette
    return obj.emission + multiply(
        obj.color,
        trace(reflection_ray) * re + trace(Ray(hitpoint, tdir)) * tr / roulette,
    )


def _tent(rng: random.Random) -> float:
    r = 2.0 * rng.random()
    return math.sqrt(r) - 1.0 if r < 1.0 else 1.0 - math.sqrt(2.0 - r)


def render(scene: Scene, photon_map: KDTree[Photon], settings: RenderSettings) -> list[Color]:
    """Render the scene into a row-major list of ``width * height`` colours."""
    width, height = settings.width, settings.height
    camera = Ray(Vec(50.0, 52.0, 295.6), normalize(Vec(0.0, -0.04, -1.0)))
    cx = Vec(width * 0.5 / height, 0.0, 0.0)
    cy = normalize(cross(cx, camera.direction)) * 0.5
    image: list[Color] = []

    for y in range(height):
        log.info("Rendering %.2f%%", 100.0 * y / max(height - 1, 1))
        rng = random.Random(y * y * y)
        for x in range(width):
            pixel = Color()
            for sy in range(_SUBSAMPLES):
                for sx in range(_SUBSAMPLES):
                    dx = _tent(rng)
                    dy = _tent(rng)
                    direction = (
                        cx * (((sx + 0.5 + dx) / 2.0 + x) / width - 0.5)
                        + cy * (((sy + 0.5 + dy) / 2.0 + y) / height - 0.5)
                        + camera.direction
                    )
                    pixel = pixel + radiance(
                        Ray(camera.origin + direction * _CAMERA_DISTANCE, normalize(direction)),
                        _START_DEPTH,
                        scene,
                        photon_map,
                        settings.gather_radius,
                        settings.gather_max_photon_num,
                        rng,
                    )
            image.append(pixel)
    return image


def _parse_args(argv: Sequence[str] | None) -> RenderSettings:
    defaults = RenderSettings()
    parser = argparse.ArgumentParser(description="Render the Cornell box with photon mapping.")
    parser.add_argument("--width", type=int, default=defaults.width)
    parser.add_argument("--height", type=int, default=defaults.height)
    parser.add_argument("--photons", type=int, default=defaults.photon_num)
    parser.add_argument("--radius", type=float, default=defaults.gather_radius)
    parser.add_argument("--max-photons", type=int, default=defaults.gather_max_photon_num)
    parser.add_argument("--seed", type=int, default=defaults.seed)
    parser.add_argument("-o", "--output", default=defaults.output)
    args = parser.parse_args(argv)
    try:
        return RenderSettings(
            width=args.width,
            height=args.height,
            photon_num=args.photons,
            gather_radius=args.radius,
            gather_max_photon_num=args.max_photons,
            output=args.output,
            seed=args.seed,
        )
    except ValueError as exc:
        parser.error(str(exc))
        raise


def main(argv: Sequence[str] | None = None) -> int:
    """Build a photon map, render the scene and write it as an .hdr file."""
    settings = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    scene = cornell_box()
    photon_map = create_photon_map(scene, settings.photon_num, random.Random(settings.seed))
    image = render(scene, photon_map, settings)
    save_hdr(settings.output, image, settings.width, settings.height)
    return 0