[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coopcoev"
version = "0.1.0"
description = "Enforced subpopulations neuroevolution for the double pole balancing task"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "neuroevolution",
    "cooperative coevolution",
    "enforced subpopulations",
    "pole balancing",
    "neural networks",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
coopcoev = "coopcoev.evolution:main"

[tool.hatch.build.targets.wheel]
packages = ["coopcoev"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
