"""setuptools 打包配置。"""

from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup


ROOT = Path(__file__).resolve().parent
VERSION = "0.1.0"

INSTALL_REQUIRES = [
    "fastapi>=0.110",
    "uvicorn>=0.29",
    "pydantic>=2.5",
    "matplotlib>=3.7",
    "numpy>=1.24",
]

TEST_REQUIRES = [
    "pytest>=7.4",
    "httpx>=0.26",
]


setup(
    name="telepanel",
    version=VERSION,
    description="Live telemetry panel fed by an embedded HTTP listener",
    python_requires=">=3.9",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=INSTALL_REQUIRES,
    extras_require={"test": TEST_REQUIRES},
)
