#!/usr/bin/env python
# -*- coding: utf-8 -*-


from setuptools import setup


readme = open('README.rst').read()
history = open('HISTORY.rst').read().replace('.. :changelog:', '')

requirements = [
    'pan-python',
]

test_requirements = [
    'mock',
    'pytest',
]

setup(
    name='panconfig',
    version='0.1.0',
    description='Configure Palo Alto Networks firewalls and Panorama via the XML API',
    long_description=readme + '\n\n' + history,
    long_description_content_type='text/x-rst',
    author='Palo Alto Networks',
    author_email='techpartners@paloaltonetworks.com',
    packages=[
        'panconfig',
    ],
    package_dir={'panconfig':
                 'panconfig'},
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        'test': test_requirements,
    },
    python_requires='>=3.6',
    license="ISC",
    zip_safe=False,
    keywords='panconfig',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: ISC License (ISCL)',
        'Natural Language :: English',
        "Programming Language :: Python :: 3",
    ],
)
