#!/usr/bin/env python

import setuptools
import os

path = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(path, 'requirements.txt')) as f:
    requirements = f.read().split()

# User README.md as long description
with open(os.path.join(path, "README.md"), encoding="utf-8") as f:
    README = f.read()


setuptools.setup(
    name='photosens',
    version='0.1.0dev1',
    description='Photosens: human photoreceptor spectral sensitivities and their population variability',
    long_description=README,
    long_description_content_type='text/markdown',
    packages=setuptools.find_packages(include=['photosens', 'photosens.*']),
    install_requires=requirements,
    extras_require={'test': ['pytest']},
    python_requires='>=3.8',
    include_package_data=True,
)
