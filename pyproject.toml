[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wafersite"
version = "0.1.0"
description = "Static documentation site assembly, a static content server, and registry data models with an in-memory store"
requires-python = ">=3.10"
dependencies = []
keywords = ["static-site", "documentation", "registry", "packages", "http"]
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
    "Topic :: Internet :: WWW/HTTP :: Site Management",
    "Topic :: Software Development :: Documentation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wafersite-build = "wafersite.sitebuild:main"

[tool.hatch.build.targets.wheel]
packages = ["wafersite"]

[tool.hatch.build.targets.sdist]
include = ["wafersite", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
