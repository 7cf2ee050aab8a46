[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "abicodec"
version = "0.1.0"
description = "Contract ABI encoding, event parameter specs, topic filters and event log decoding"
requires-python = ">=3.10"
keywords = ["abi", "ethereum", "encoding", "events", "keccak", "topics"]
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
]
dependencies = [
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["abicodec"]

[tool.pytest.ini_options]
addopts = "-ra"
