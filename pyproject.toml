[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "attic"
version = "0.1.0"
description = "Core library for a Nix binary cache: cache names, store paths, hashes, signing, content-defined chunking and API bodies"
requires-python = ">=3.10"
dependencies = [
    "pynacl",
]
keywords = ["nix", "binary-cache", "nar", "ed25519", "chunking", "fastcdc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: System :: Archiving :: Packaging",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["attic"]

[tool.hatch.build.targets.sdist]
include = ["attic", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
