[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "enbt"
version = "1.0.0"
description = "Build a Minecraft servers.dat (NBT) file from a CSV, TOML or JSON list of servers"
requires-python = ">=3.11"
dependencies = []
keywords = ["minecraft", "nbt", "servers.dat", "server list", "csv", "toml", "json"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: File Formats",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
enbt = "enbt.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["enbt"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
