from __future__ import annotations

import os

from setuptools import find_packages, setup


def read_version() -> str:
    """Read the release version, preferring the PKG_VERSION environment variable."""
    env_version = os.getenv("PKG_VERSION", "").strip()
    if env_version:
        return env_version.lstrip("v")
    return "1.0.0"


setup(
    name="densebits",
    version=read_version(),
    description="Dense bit vectors and bit sets over interchangeable block storage.",
    long_description="Dense bit vectors and bit sets over interchangeable block storage.",
    long_description_content_type="text/plain",
    packages=find_packages(include=["densebits", "densebits.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
