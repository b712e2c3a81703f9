[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hotcoffee"
version = "0.1.0"
description = "Coffee shop management service: menu, inventory, orders and sales reports over a JSON HTTP API"
requires-python = ">=3.10"
dependencies = []
keywords = ["coffee", "shop", "inventory", "orders", "wsgi", "json", "rest"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
hot-coffee = "hotcoffee.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hotcoffee"]

[tool.pytest.ini_options]
addopts = "-ra"
