[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "injectry"
version = "0.1.0"
description = "An asyncio dependency-injection registry with transients, singletons, validation and cycle detection."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "dependency-injection",
    "di",
    "ioc",
    "registry",
    "singleton",
    "transient",
    "asyncio",
]
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
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["injectry"]

[tool.hatch.build.targets.sdist]
include = ["injectry", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
