[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aoigrid"
version = "0.1.0"
description = "Grid-based area-of-interest tracking and tick-driven entity movement for multiplayer game servers"
requires-python = ">=3.10"
dependencies = []
keywords = ["aoi", "area-of-interest", "game-server", "mmo", "grid", "visibility"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Multi-User Dungeons (MUD)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["aoigrid"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
