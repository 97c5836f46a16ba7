[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "opensheet"
version = "1.0.0"
description = "Spreadsheet workbook model with CSV, XLSX and .opensheet file support, chart rendering and extra statistics"
requires-python = ">=3.10"
keywords = ["spreadsheet", "workbook", "csv", "xlsx", "charts", "statistics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Spreadsheet",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["opensheet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
