[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bsvp2p"
version = "0.1.0"
description = "Bitcoin SV peer-to-peer building blocks: chain hashes, merkle trees, wire encoding and peer management"
requires-python = ">=3.10"
dependencies = []
keywords = ["bitcoin", "bsv", "p2p", "wire", "merkle", "blockchain"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bsvp2p"]

[tool.pytest.ini_options]
addopts = "-ra"
