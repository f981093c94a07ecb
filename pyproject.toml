[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "medoidtemper"
version = "0.1.0"
description = "K-medoids clustering solved as a cardinality-constrained binary quadratic problem with parallel tempering"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "k-medoids",
    "clustering",
    "parallel tempering",
    "replica exchange",
    "simulated annealing",
    "binary quadratic optimization",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
medoidtemper = "medoidtemper.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["medoidtemper"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
