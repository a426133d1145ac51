[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "schedstore"
version = "0.1.0"
description = "CPU scheduling simulators (FCFS, SJF, priority, round robin, SRTF) and a bitmap-managed block store"
requires-python = ">=3.10"
dependencies = []
keywords = ["scheduling", "fcfs", "round-robin", "srtf", "block-store", "bitmap", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
schedstore-analysis = "schedstore.analysis:main"

[tool.hatch.build.targets.wheel]
packages = ["schedstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
