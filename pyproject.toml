[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "photonmapper"
version = "0.1.0"
description = "A small photon-mapping renderer for a Cornell-box scene that writes Radiance HDR images"
requires-python = ">=3.10"
dependencies = []
keywords = ["photon mapping", "ray tracing", "global illumination", "kd-tree", "hdr", "rendering"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
photonmapper = "photonmapper.render:main"

[tool.hatch.build.targets.wheel]
packages = ["photonmapper"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
