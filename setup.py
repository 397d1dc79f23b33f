#!/usr/bin/env python

"""Distutils setup file"""

from setuptools import setup, find_packages

# Metadata
PACKAGE_NAME = "PyGenerics"
PACKAGE_VERSION = "0.1.0"

setup(
    name=PACKAGE_NAME,
    version=PACKAGE_VERSION,

    description="Multiple dispatch generic functions over a class hierarchy",
    license="PSF or ZPL",

    python_requires=">=3.8",
    install_requires=["zope.interface"],

    test_suite  = 'generics.tests.test_suite',
    package_dir = {'':'src'},
    packages    = find_packages('src'),
)
