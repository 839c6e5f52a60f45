[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mallowkit"
version = "0.1.0"
description = "AArch64 instruction encoders, delegates, log sinks and JSON configuration helpers for code-patching toolkits"
requires-python = ">=3.10"
dependencies = []
keywords = ["aarch64", "armv8", "assembler", "instruction-encoding", "logging", "config"]
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
    "Topic :: Software Development :: Assemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mallowkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
