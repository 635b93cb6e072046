[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "battle_game"
version = "0.1.0"
description = "Tick-based simulation core for a top-down multiplayer tank battle game"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "simulation", "tanks", "arcade", "2d"]
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
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["battle_game"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
