[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gptlink"
version = "0.1.0"
description = "A small client for the OpenAI REST API with typed responses and event callbacks"
requires-python = ">=3.10"
dependencies = []
keywords = ["openai", "gpt", "chat", "completion", "api", "client", "http", "multipart"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gptlink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
