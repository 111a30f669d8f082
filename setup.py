from setuptools import setup, find_packages
from codecs import open
from os import path

VERSION = '0.1.0'

here = path.abspath(path.dirname(__file__))

# Get the long description from the README file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='git-hours-py',
    version=VERSION,
    description='Estimate time spent on a git repository from the timing of its commits',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='BSD',
    classifiers=[
      'Development Status :: 3 - Alpha',
      'Intended Audience :: Developers',
      'Programming Language :: Python :: 3',
    ],
    keywords='git hours time estimate pandas',
    packages=find_packages(exclude=['tests*', 'examples*']),
    include_package_data=True,
    python_requires='>=3.10',
    install_requires=[
        'gitpython>=3.1.0',
        'joblib>=1.0.0',
        'numpy>=1.20.0',
        'pandas>=1.3.0'
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'git-hours=githours.cli:main',
        ]
    },
)
