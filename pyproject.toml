[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cim-ipld"
version = "0.3.0"
description = "Content identifiers, IPLD codecs and content-addressed chains for Composable Information Machines"
requires-python = ">=3.10"
dependencies = [
    "cbor2",
]
keywords = ["ipld", "cid", "content-addressing", "cim", "dag", "blake3", "multihash", "cbor"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cim-ipld-demo = "cim_ipld.demo:main"
cim-ipld-events = "cim_ipld.events:main"

[tool.hatch.build.targets.wheel]
packages = ["cim_ipld"]

[tool.hatch.build.targets.sdist]
include = ["cim_ipld", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
