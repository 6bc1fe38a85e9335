# photonmapper

A compact photon-mapping renderer. It fires photons from the light in a
Cornell-box scene and stores every diffuse hit in a kd-tree. It then traces
camera rays and estimates radiance from the nearest stored photons. The image
is saved as a Radiance `.hdr` file in RGBE format, with each scanline written
as four channel planes.

The scene holds a spherical light, six very large spheres that act as the
left, right, back and front walls, the floor and the ceiling, one mirror
sphere and one glass sphere.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
photonmapper
```

This renders the scene and writes `image.hdr` to the current directory.
Progress messages are logged to standard error. The options are:

- `--width` and `--height` set the image size. The defaults are 640 and 480.
- `--photons` sets the number of photons shot from the light. The default is 50000.
- `--radius` sets the gathering limit. The default is 32.0. It is compared against squared distances to photons.
- `--max-photons` sets the most photons used per density estimate. The default is 3.
- `--seed` seeds the random generator used for photon shooting. The default is 1.
- `-o`, `--output` sets the output file. The default is `image.hdr`.

Each pixel takes 2×2 jittered subsamples. Each image row uses its own random
generator, seeded from the row number.

Rendering in pure Python is slow. Use a smaller image or fewer photons to try
it out:

```
photonmapper --width 64 --height 48 --photons 2000 -o small.hdr
```

## Library use

```python
import random

from photonmapper.scene import cornell_box
from photonmapper.photon_map import create_photon_map
from photonmapper.render import RenderSettings, render
from photonmapper.hdr import save_hdr

scene = cornell_box()
photon_map = create_photon_map(scene, 2000, random.Random(0))
settings = RenderSettings(width=64, height=48, photon_num=2000)
image = render(scene, photon_map, settings)
save_hdr("small.hdr", image, settings.width, settings.height)
```

`RenderSettings` raises `ValueError` if the width, height, photon count or
maximum number of gathered photons is not positive.

The building blocks can also be used on their own:

- `photonmapper.vector`: `Vec` (also used as `Color`), `Ray`, `dot`, `cross`, `multiply`, `normalize` and `orthonormal_basis`.
- `photonmapper.scene`: `Sphere`, `ReflectionType` (`DIFFUSE`, `SPECULAR`, `REFRACTION`), `Scene` with `intersect`, which returns a `Hit` or `None`, and `light()`, plus `cornell_box()`.
- `photonmapper.kdtree`: `KDTree` with `add_point`, `build` and `search_knn(Query)`. A search returns a list of `Neighbor` results, nearest first. It keeps only points that lie within the query's squared radius and close to the plane given by the query normal.
- `photonmapper.photon_map`: `Photon`, `emit_photon`, `trace_photon` (a generator of stored photons) and `create_photon_map`.
- `photonmapper.hdr`: `RGBEPixel`, `rgbe_pixel`, `encode_hdr`, which returns the file contents as bytes, and `save_hdr`.
- `photonmapper.render`: `RenderSettings`, `radiance`, `render` and `main`.

## Limitations

The package renders only the built-in Cornell box and has no way to load
other scenes. The camera is fixed. The package does not display images, and
`.hdr` is its only output format.