from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup

# Read README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    # Package metadata
    name="contentlens",
    version="1.0.0",
    description="Real-time AI-likelihood scoring for text blocks in live web pages",
    long_description=long_description,
    long_description_content_type="text/markdown",
    # Package discovery
    packages=find_packages(exclude=["tests", "tests.*"]),
    # Dependencies
    install_requires=[
        "beautifulsoup4>=4.12",
        "soupsieve>=2.5",
        "pydantic>=2.5",
        "cachetools>=5.3",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
    ],
    # Optional dependencies (for development)
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23",
            "black>=23.0.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
        ],
    },
    # CLI commands
    entry_points={
        "console_scripts": [
            "contentlens=contentlens.cli:main",
        ],
    },
    # Python version requirement
    python_requires=">=3.10",
    # PyPI classifiers
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
)
