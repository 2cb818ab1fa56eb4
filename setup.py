"""
ContentDB setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="contentdb",
    version="0.3.0",
    description="ContentDB — records backed by static site front-matter and YAML data files",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "contentdb=contentdb.cli:main",
        ],
    },
    install_requires=[
        "pydantic>=2.5",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
)
