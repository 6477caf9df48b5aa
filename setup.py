"""
Setup script for hf-link package
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="hf-link",
    version="1.0.0",
    description="Maidenhead geodesy, HF propagation heuristics and mastery-gated voice-server sessions for Morse training",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Education",
        "Topic :: Communications :: Ham Radio",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "toml>=0.10.2",
        "numpy>=1.24.0",  # Seedable random source for propagation
        "pandas>=2.0.0",  # For forecast tables
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "anyio>=4.0.0",  # pytest plugin for async tests
        ],
        "dev": [
            "pytest>=7.0.0",
            "anyio>=4.0.0",  # pytest plugin for async tests
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "hf-link=hf_link.cli:main",
        ],
    },
)
