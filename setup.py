"""Setup script for ga-evolve"""

from setuptools import find_packages, setup

with open("requirements.txt") as f:
    requirements = [
        line.strip() for line in f if line.strip() and not line.startswith("#")
    ]

setup(
    name="ga-evolve",
    version="0.1.0",
    description="Elitist genetic algorithm engine over opaque individuals",
    packages=find_packages(exclude=["tests*"]),
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": ["pytest", "pytest-mock", "black", "isort", "mypy"],
    },
    entry_points={
        "console_scripts": ["ga-evolve=ga_core.cli:main"],
    },
)
