[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "offsetptr"
version = "0.1.0"
description = "32-bit offset pointers into a rebasable byte buffer, with typed and untyped flavours"
requires-python = ">=3.10"
dependencies = []
keywords = ["pointer", "offset", "memory", "buffer", "struct", "layout"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["offsetptr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
