[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dolkit"
version = "0.1.0"
description = "Convert big-endian PowerPC ELF executables to DOL images, with colour and material helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["elf", "dol", "powerpc", "converter", "material", "color"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dolkit = "dolkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dolkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
