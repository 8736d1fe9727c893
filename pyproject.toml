[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitobj"
version = "2.0.0"
description = "Read and write Git loose objects (blobs and commits) in on-disk or in-memory stores"
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "objects", "blob", "commit", "object database", "zlib"]
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
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gitobj"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
