"""PoorMVC setup.py"""
import re
from os import walk

from setuptools import setup  # type: ignore


def version():
    """Return __version__ from poormvc/state.py without importing it."""
    with open('poormvc/state.py', 'r', encoding="utf-8") as state:
        return re.search(r'^__version__ = "([^"]+)"', state.read(),
                         re.M).group(1)


def find_data_files(directory, target_folder=""):
    """Find files in directory, and prepare tuple for setup."""
    retval = []
    for root, _, files in walk(directory):
        if target_folder:
            retval.append((target_folder,
                           list(root + '/' + f for f in files
                                if f[0] != '.' and f[-1] != '~')))
        else:
            retval.append((root,
                           list(root + '/' + f for f in files
                                if f[0] != '.' and f[-1] != '~')))
    return retval


def doc():
    """Return README.rst content."""
    with open('README.rst', 'r', encoding="utf-8") as readme:
        return readme.read().strip()


setup(name="PoorMVC",
      version=version(),
      description="Poor MVC framework for Python",
      packages=['poormvc'],
      data_files=[('share/doc/poormvc', ['README.rst'])] +
      find_data_files("examples", "share/poormvc/examples"),
      license="BSD",
      long_description=doc(),
      long_description_content_type="text/x-rst",
      keywords='web wsgi mvc development',
      classifiers=[
          "Development Status :: 4 - Beta",
          "Environment :: Web Environment", "Intended Audience :: Developers",
          "License :: OSI Approved :: BSD License",
          "Natural Language :: English",
          "Operating System :: POSIX",
          "Operating System :: POSIX :: Linux",
          "Programming Language :: Python :: 3 :: Only",
          "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
          "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
          "Topic :: Software Development :: Libraries :: Application Frameworks"
      ],
      python_requires=">=3.9",
      install_requires=['pyaes', 'python-memcached'],
      extras_require={'test': ['pytest', 'requests']})
