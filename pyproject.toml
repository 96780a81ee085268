[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sewup"
version = "0.1.0"
description = "Key/value and relational storage in 32-byte slots for eWasm contracts, with runtime interfaces and token storage helpers"
requires-python = ">=3.10"
keywords = ["ethereum", "ewasm", "contract", "storage", "key-value", "rdb", "bincode"]
classifiers = [
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Intended Audience :: Developers",
    "Topic :: Software Development :: Libraries",
]
dependencies = [
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sewup"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
