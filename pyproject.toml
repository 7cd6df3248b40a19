[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sockchat"
version = "0.1.0"
description = "A small TCP chat server and client that relays each message to every connected client"
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "tcp", "socket", "broadcast", "server", "client"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chatserv = "sockchat.server:main"
chatcli = "sockchat.client:main"

[tool.hatch.build.targets.wheel]
packages = ["sockchat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
