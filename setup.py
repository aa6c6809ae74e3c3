# NOTE: Should replace with a pyproject.toml
import os
from setuptools import setup, find_packages

with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "README.md")) as infile:
    long_description = infile.read()

setup(
    name="prewarm",
    version="0.1.0",
    description="Cooldown-gated warm calls for remote inference endpoints.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license_expression="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp[speedups]>=3.10,<4",
        "loguru==0.7.2",
        "pydantic>=2.9,<3",
        "pybase64>=1.4.0",
        "pillow>=10.0",
        "rich>=13.0.0",
        "typer>=0.12.5",
    ],
    extras_require={
        "dev": [
            "black",
            "flake8",
            "wheel",
            "pytest>=8",
            "pytest-asyncio>=0.23",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
    ],
    entry_points={
        "console_scripts": [
            "prewarm=prewarm.cli:app",
        ],
    },
)
