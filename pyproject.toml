[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qnsdk"
version = "7.9.8"
description = "Request signing, an HTTP API client, CDN management and device-linking helpers for an object storage service"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["signing", "hmac", "cdn", "anti-leech", "sdk", "device", "linking"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["qnsdk"]

[tool.pytest.ini_options]
addopts = "-ra"
