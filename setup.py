#!/usr/bin/env python

from setuptools import setup, find_packages


setup(
    name="funcfeatures",
    version="0.1.0",
    description="Structural and behavioral classification of Python callables",
    long_description=open("README.rst").read(),
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.8",
    platforms=["any"],
    keywords="callable introspection partial wraps inspect",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
