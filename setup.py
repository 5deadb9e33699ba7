#!/usr/bin/env python3
"""
Setup script for psyq-sigscan
Identifies PSY-Q SDK library modules statically linked into PlayStation executables
"""

from setuptools import setup, find_packages

# Read README file
def read_readme():
    try:
        with open("README.md", "r", encoding="utf-8") as fh:
            return fh.read()
    except FileNotFoundError:
        return "Identifies PSY-Q SDK library modules statically linked into PlayStation executables"

# Read requirements
def read_requirements():
    try:
        with open("requirements.txt", "r", encoding="utf-8") as fh:
            requirements = []
            for line in fh:
                line = line.strip()
                if line and not line.startswith("#"):
                    requirements.append(line)
            return requirements
    except FileNotFoundError:
        return [
            "requests>=2.28.0",
            "colorama>=0.4.6",
            "click>=8.0.0",
            "pydantic>=2.0.0",
            "pydantic-settings>=2.0.0",
            "pyyaml>=6.0",
        ]

setup(
    name="psyq-sigscan",
    version="1.0.0",
    description="Identifies PSY-Q SDK library modules statically linked into PlayStation executables",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Reverse Engineering",
        "Topic :: Software Development :: Disassemblers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="psx playstation psy-q signatures decompilation reverse-engineering binary-analysis",
    python_requires=">=3.11",
    install_requires=read_requirements(),
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "psyq-sigscan=psyq_sigscan.cli.main:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
