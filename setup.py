#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""The setup script."""

from setuptools import setup, find_packages

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('requirements.txt') as r:
    requirements = [line.strip() for line in r.readlines() if line.strip()]

test_requirements = ['pytest', ]

setup(
    name='kubeflavor',
    version='0.3.0',
    description='Kubernetes flavor plugin issuing per node TLS bundles',
    long_description=readme,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={'kubeflavor.provision': ['scripts/*']},
    include_package_data=True,
    install_requires=requirements,
    extras_require={'test': test_requirements},
    python_requires='>=3.9',
    entry_points={
        'console_scripts': ['kubeflavor=kubeflavor.kubeflavor:main'],
    },
)
