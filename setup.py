# setup.py
from setuptools import setup, find_packages

setup(
    name="comptime",
    version="0.1.0",
    description="Compile-time expression macro evaluator",
    packages=find_packages(include=["comptime", "comptime.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
