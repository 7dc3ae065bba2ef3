# setup.py
from setuptools import setup, find_packages

setup(
    name="investigation_graph_overlays",
    version="0.1.0",
    description="Structural classification and spatial density overlays for investigation graphs",
    packages=find_packages(
        exclude=(
            "tests",
            "docs",
            "build",
            "dist",
        )
    ),
    install_requires=[
        "numpy",
        "networkx",
        "pandas",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.10",
)
