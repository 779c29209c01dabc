[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "texdecode"
version = "0.1.0"
description = "Pure-Python decoders for GPU block-compressed textures (BC1-BC7, ATC, ASTC) to BGRA pixels"
requires-python = ">=3.10"
dependencies = []
keywords = ["texture", "decoder", "bc1", "bc6h", "bc7", "dxt", "astc", "atc", "gpu"]
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
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["texdecode"]

[tool.pytest.ini_options]
addopts = "-ra"
