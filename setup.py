#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Courseware Studio - Setup Configuration
"""

from setuptools import setup, find_namespace_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Read requirements
requirements_path = Path(__file__).parent / "requirements.txt"
requirements = []
if requirements_path.exists():
    requirements = [
        line.strip()
        for line in requirements_path.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.startswith("#")
    ]

setup(
    name="courseware-studio",
    version="1.0.0",
    description="AI-assisted courseware editor with TOC, pagination, print and Word export",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Courseware Studio Team",
    python_requires=">=3.9",
    packages=find_namespace_packages(include=["ai_providers*", "api*", "config*", "core*"]),
    py_modules=["build_courseware"],
    install_requires=requirements,
    extras_require={
        # Development dependencies
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.26.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "build-courseware=build_courseware:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Topic :: Text Processing :: Markup",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="courseware training-material docx toc pagination gemini",
)
