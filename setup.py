import os
from setuptools import setup, find_packages


def read_requirements(fname):
    return open(os.path.join('requirements', fname)).read().strip().splitlines()


setup(
    name="traffic-model",
    version="0.1",
    description="TNTP network, zoning and demand reader for python.",
    author="Matt Battifarano",
    author_email="mbattifa@andrew.cmu.edu",
    package_dir={'': 'src'},
    packages=find_packages('src'),
    zip_safe=False,
    tests_require=read_requirements('test.txt'),
    extras_require={'test': read_requirements('test.txt')},
    install_requires=read_requirements('install.txt'),
    python_requires=">=3.8",
)
