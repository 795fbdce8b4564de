from setuptools import setup, find_packages

setup(
    name="gridmatch",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "gymnasium",  # Environment wrapper around a single round
        "filelock",  # Locked reads of round files
    ],
    extras_require={
        "test": ["pytest"],
    },
)
