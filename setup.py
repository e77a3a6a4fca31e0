#!/usr/bin/env python

from setuptools import setup


VERSION = "0.1a1"

setup(
    name="lxml-pathselect",
    version=VERSION,
    packages=["lxml_pathselect"],
    python_requires=">=3.10",
    install_requires=["lxml"],
    extras_require={"test": ["pytest"]},
)
