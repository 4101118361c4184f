[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "emitter"
version = "0.1.0"
description = "Security primitives for an emitter message broker: channel parsing, access keys, key ciphers and licences."
requires-python = ">=3.10"
dependencies = []
keywords = ["emitter", "mqtt", "pubsub", "security", "xtea", "salsa20", "license", "murmur3"]
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
    "Topic :: Security",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["emitter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
