#!/usr/bin/env python3
import setuptools

setuptools.setup(
    name="import-optimizer",
    version="0.1.0",
    packages=["import_optimizer"],
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "imo = import_optimizer.cli:main",
        ],
    },
    author="",
    description="Command-line tool to merge, deduplicate and sort JavaScript/TypeScript import declarations",
    license="MIT",
)
