[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jsonnet-core"
version = "0.1.0"
description = "Runtime building blocks of a Jsonnet interpreter: errors, lazy values, contexts, arrays, operators and command-line options."
requires-python = ">=3.10"
dependencies = []
keywords = ["jsonnet", "interpreter", "configuration", "json", "lazy-evaluation"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jsonnet_core"]

[tool.hatch.build.targets.sdist]
include = ["jsonnet_core", "tests", "README.md", "pyproject.toml"]

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
