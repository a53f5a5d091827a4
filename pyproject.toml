[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ipmcube"
version = "0.1.0"
description = "Read IPM XML performance profiles and model CUBE 3 profile data"
requires-python = ">=3.10"
dependencies = []
keywords = ["ipm", "cube", "profiling", "mpi", "performance", "hpc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ipmcube"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
