"""
erdkit setup.py — install the wallet library and its command-line tool.

Usage:
    pip install .              # install everything
    pip install ".[dev]"       # install with dev tools
    pip install -e ".[dev]"    # editable install for development
"""

from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).resolve().parent
long_description = ""
if (HERE / "README.md").exists():
    long_description = (HERE / "README.md").read_text(encoding="utf-8")

setup(
    name="erdkit",
    version="0.4.0",
    description="MultiversX wallet toolkit: key files, keystores and signed ESDT transactions",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    author="erdkit Contributors",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*", "build"]),
    py_modules=["run_wallet"],
    install_requires=[
        "PyNaCl>=1.5.0,<2",
        "bech32>=1.2.0,<2",
        "tomli>=2.0.0,<3;python_version<'3.11'",
        "pycryptodome>=3.21.0,<4",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "mypy>=1.5",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "erdkit=run_wallet:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries",
    ],
)
