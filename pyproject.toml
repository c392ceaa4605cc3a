[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "satnetstack"
version = "0.1.0"
description = "Onboard network stack for nanosatellite swarms: internal router unit, range filtering, UDP forwarding and OLSR hello exchange"
requires-python = ">=3.10"
dependencies = []
keywords = ["nanosatellite", "networking", "olsr", "routing", "udp", "mesh"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
satnetstack = "satnetstack.app:main"

[tool.hatch.build.targets.wheel]
packages = ["satnetstack"]

[tool.pytest.ini_options]
addopts = "-ra"
