#!/usr/bin/env python3
"""
Setup script for cloudmail.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="cloudmail",
    version="0.1.0",
    description="Conditional wiring of an AWS SES mail sender into an async DI container",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="cloudmail Contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        # without boto3 the SES autoconfiguration registers nothing
        "ses": [
            "boto3>=1.28.0",
            "botocore>=1.31.0",
        ],
        "dev": [
            "boto3>=1.28.0",
            "botocore>=1.31.0",
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cloudmail=cloudmail.cli.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Communications :: Email",
        "Topic :: Software Development :: Libraries :: Application Frameworks",
    ],
    keywords="aws ses email mail dependency-injection autoconfiguration",
)
