"""
Setup script for pysatl-closedform.

Closed-form univariate distribution families (inverse gamma, Laplace,
Bernoulli) on top of the characteristic-graph distribution framework.
"""

from setuptools import find_packages, setup

setup(
    name="pysatl-closedform",
    version="0.1.0",
    description="Closed-form univariate distribution families for PySATL",
    author="PySATL project",
    license="MIT",
    python_requires=">=3.12",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["pysatl_closedform", "pysatl_closedform.*"]),
    install_requires=[
        "numpy>=2.0",
        "scipy>=1.13",
        "mypy_extensions>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
)
