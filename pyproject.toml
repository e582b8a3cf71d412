[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nemo"
version = "0.1.0"
description = "Asset collection core for IP, domain and port reconnaissance: configuration, storage models, IP location, honeypot and CDN checks"
requires-python = ">=3.10"
keywords = ["security", "reconnaissance", "asset-management", "cdn", "ip-location", "domain"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Information Technology",
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
    "sqlalchemy",
    "dnspython",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["nemo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
