[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kumabot"
version = "0.1.0"
description = "Framework-independent chat-bot features: code runner, sign-in scores, wordle, tarot, hot words, sleep tracking, voice clips and more"
requires-python = ">=3.10"
keywords = ["chatbot", "wordle", "tarot", "sign-in", "hot-words"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "requests",
    "pillow",
    "lxml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kumabot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
