[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yclass"
version = "0.1.0"
description = "Lay out classes over process memory, search it through pointer chains and generate Rust or C++ definitions"
requires-python = ">=3.11"
keywords = [
    "reverse-engineering",
    "memory",
    "structures",
    "class-reconstruction",
    "code-generation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Debuggers",
    "Topic :: Software Development :: Code Generators",
    "Typing :: Typed",
]
dependencies = [
    "platformdirs",
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
yclass = "yclass.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["yclass"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
