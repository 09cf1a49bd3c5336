# setup.py
from setuptools import find_packages, setup

setup(
    name="blockstore",
    version="0.1.0",
    description="Palette-compressed block storage for schematic regions",
    packages=find_packages(include=["blockstore", "blockstore.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.22",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
)
