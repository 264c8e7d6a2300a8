[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "swiftpricing"
version = "0.1.0"
description = "Heston and Black-Scholes call pricing, Heston Jacobians and calibration with Gauss-Legendre quadrature and Shannon-wavelet (SWIFT) expansions"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = [
    "heston",
    "black-scholes",
    "option pricing",
    "calibration",
    "levenberg-marquardt",
    "shannon wavelets",
    "swift",
    "characteristic function",
    "quantitative finance",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Financial and Insurance Industry",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
swiftpricing-calibrate = "swiftpricing.calibration:main"
swiftpricing-profile = "swiftpricing.profiling:main"

[tool.hatch.build.targets.wheel]
packages = ["swiftpricing"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
