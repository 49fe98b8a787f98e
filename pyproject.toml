[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smallproxy"
version = "0.1.0"
description = "Building blocks for a small HTTP proxy: access control, basic auth, URL filtering, buffers and error pages"
requires-python = ">=3.10"
dependencies = []
keywords = ["proxy", "http", "acl", "basic-auth", "filter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Proxy Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["smallproxy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
