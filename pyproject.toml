[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vcheck"
version = "0.1.0"
description = "CPE parsing, offline CPE query building, a local index cache record and CVSS score helpers"
requires-python = ">=3.10"
keywords = ["cpe", "vulnerability", "cve", "cvss", "sbom", "cyclonedx", "security"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vcheck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
