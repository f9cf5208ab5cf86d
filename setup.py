from sys import executable

setuptools_import_error_message = """setuptools is not installed for """ + executable + """
Please follow this link for installing instructions :
https://pypi.org/project/setuptools/
make sure you use \"""" + executable + """\" during the installation"""

try:
    from setuptools import setup
except ImportError as e:
    raise ImportError(setuptools_import_error_message) from e

from os.path import join as pjoin
from os.path import dirname


# Utility function to read the README file, used for the long_description.
def read(fname):
    with open(pjoin(dirname(__file__), fname)) as f:
        return f.read()


setup(
    name='mathprog',
    version='0.1.0',
    packages=[
        'mathprog',
        'mathprog.python',],
    python_requires='>=3.9',
    install_requires=[
        'absl-py >= 2.0.0',
        'immutabledict >= 3.0.0',
        'numpy >= 1.22'],
    extras_require={
        'test': ['pytest'],
    },
    license='Apache 2.0',
    description='Algebraic modeling of mixed integer linear and quadratic programs',
    keywords=('operations research, ' +
              'linear programming, ' + 'quadratic programming, ' +
              'mixed integer programming, ' + 'python'),
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Software Development :: Libraries :: Python Modules'],
    long_description=read('README.md'),
    long_description_content_type='text/markdown',
)
