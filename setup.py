import os
from setuptools import setup, find_packages



def read(fname):
    this_directory = os.path.abspath(os.path.dirname(__file__))
    with open(os.path.join(this_directory, fname)) as f:
        out = f.read()
    return out


def update_version():
    ver = read('randspca/_version.py').rstrip('\n').split()[-1].strip('"')
    return ver


def get_readme():
    return read('README.md')


setup(
    name="randspca",
    version=update_version(),
    description="Randomized sparse principal component analysis via variable projection.",
    license="MIT",
    keywords="sparse PCA randomized linear algebra",
    packages=['randspca'] + ['randspca.' + s for s in find_packages(where='randspca')],
    long_description=get_readme(),
    long_description_content_type='text/markdown',
    classifiers=[
        "Development Status :: 4 - Beta",
        "Topic :: Scientific/Engineering :: Mathematics",
        "License :: OSI Approved :: MIT License",
    ],
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy',
        'pandas',
        'scikit-learn',
        'anndata',
    ],
    extras_require={
        'test': [
            'pytest',
        ]
    },
)
