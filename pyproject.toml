[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lendcell"
version = "0.1.0"
description = "Lend read-only access to a value across threads with explicit owner and borrower roles, using either a borrow count or a liveness flag."
requires-python = ">=3.10"
dependencies = []
keywords = ["threading", "borrow", "lending", "ownership", "reference-counting", "concurrency"]
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
packages = ["lendcell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
