from setuptools import find_packages, setup

setup(
    name="tinywheel",
    version="0.1.0",
    description="Build a Python package from a single annotated source file",
    python_requires=">=3.9",
    packages=find_packages(include=["tinywheel", "tinywheel.*"]),
    install_requires=[
        "PyYAML>=6.0",
        "build>=1.0",
        "setuptools>=61.0",
    ],
    extras_require={
        "test": ["pytest>=7.0", "wheel"],
    },
    entry_points={
        "console_scripts": [
            "tinywheel=tinywheel.cli:main",
        ],
    },
)
