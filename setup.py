#!/usr/bin/env python3
"""
netsweep - Network Security Scanner

Async device discovery, port/service fingerprinting and heuristic risk
scoring for ad-hoc audits of a local or reachable subnet.
"""

from setuptools import setup, find_packages
import os

# Read the README file for long description
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return __doc__

setup(
    name='netsweep',
    version='1.0.0',
    description='Async network discovery, port scanning and risk scoring',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    author='netsweep contributors',
    author_email='',
    packages=find_packages(exclude=['tests', 'tests.*']),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Information Technology',
        'Intended Audience :: System Administrators',
        'Topic :: Security',
        'Topic :: System :: Networking',
        'Topic :: System :: Networking :: Monitoring',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Operating System :: POSIX :: Linux',
        'Operating System :: MacOS :: MacOS X',
        'Operating System :: Microsoft :: Windows',
    ],
    keywords='network scanner security port scanner asyncio vulnerability risk discovery',
    python_requires='>=3.8',

    install_requires=[
        'requests>=2.28.0',
        'rich>=13.0.0',  # Console output, progress bars and logging
    ],

    extras_require={
        'test': [
            'pytest>=7.0.0',
            'pytest-asyncio>=0.21.0',
        ],
        'dev': [
            'pytest>=7.0.0',
            'pytest-asyncio>=0.21.0',
            'black>=22.0.0',
            'flake8>=5.0.0',
            'mypy>=0.990',
        ],
    },

    entry_points={
        'console_scripts': [
            'netsweep=netsweep.cli:main',
        ],
    },

    include_package_data=True,
    zip_safe=False,
)
