[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quadforge"
version = "0.1.0"
description = "Core of a small 2D scene engine: events, input polling, cameras, shaders, textures, a batching quad renderer and YAML scene files."
requires-python = ">=3.10"
keywords = ["renderer", "2d", "quad", "batching", "camera", "scene", "events", "yaml"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "numpy",
    "pyyaml",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["quadforge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
