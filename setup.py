"""
Setup script for streaming-quantiles.
"""

from setuptools import setup, find_packages

setup(
    name="streaming-quantiles",
    version="0.1.0",
    packages=find_packages(include=["streaming_quantiles", "streaming_quantiles.*"]),
    package_data={"streaming_quantiles": ["py.typed"]},
    python_requires=">=3.8",
    extras_require={"test": ["pytest"]},
)
