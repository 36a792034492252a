[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "attestkit"
version = "0.1.0"
description = "Verification of signed attestation reports: HTTP response parsing, lenient JSON reading, certificate chain and signature checks, robust descriptor I/O and TCP sockets"
requires-python = ">=3.10"
keywords = ["attestation", "x509", "certificate-chain", "http-parser", "json", "url-decode"]
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
    "Topic :: Security :: Cryptography",
    "Typing :: Typed",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["attestkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
