[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "luakit"
version = "0.1.0"
description = "Building blocks of a Lua 5.3 runtime: numeral parsing and printing, type tags, bytecode encoding, string interning and the os library"
requires-python = ">=3.10"
dependencies = []
keywords = ["lua", "interpreter", "bytecode", "opcodes", "string-interning"]
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
    "Topic :: Software Development :: Interpreters",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["luakit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
