[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sha256gc"
version = "0.1.0"
description = "Two-party SHA-256 over a garbled Bristol-format Boolean circuit using half-gates and free-XOR"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["garbled circuits", "secure computation", "mpc", "sha256", "half-gates", "bristol"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sha256gc = "sha256gc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sha256gc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
