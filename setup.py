#!/usr/bin/env python3
"""Dockship - Setup"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="dockship",
    version="1.0.0",
    description="Deploy a Dockerized application to a remote server behind Nginx",
    author="Dockship Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"dockship": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "dockship=dockship.main:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
