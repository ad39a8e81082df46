"""A command-line grammar engine: tokenizes arguments, walks them
against a declared tree of commands, options, and arguments, and
produces a typed, validated parse result with diagnostics and
suggestions.
"""

from setuptools import setup


__version__ = '0.1.0dev'
__license__ = 'BSD'


setup(name='argot',
      version=__version__,
      description="A command-line grammar engine. Tokenizer, parser, and validator with response files, directives, and typo suggestions.",
      long_description=__doc__,
      packages=['argot', 'argot.test'],
      include_package_data=True,
      zip_safe=False,
      license=__license__,
      platforms='any',
      install_requires=['boltons>=20.0.0'],
      extras_require={'test': ['pytest']},
      classifiers=[
          'Topic :: Utilities',
          'Intended Audience :: Developers',
          'Topic :: Software Development :: Libraries',
          'Programming Language :: Python :: 3.8',
          'Programming Language :: Python :: 3.9',
          'Programming Language :: Python :: 3.10',
          'Programming Language :: Python :: 3.11',
          'Programming Language :: Python :: 3.12',
          'Programming Language :: Python :: 3 :: Only',
          'Programming Language :: Python :: Implementation :: CPython',
          'Programming Language :: Python :: Implementation :: PyPy', ]
      )

"""
A brief checklist for release:

* pytest
* git commit (if applicable)
* Bump setup.py version off of -dev
* git commit -a -m "bump version for vx.y.z release"
* rm -rf dist/*
* python setup.py sdist bdist_wheel
* twine upload dist/*
* git tag -a vx.y.z -m "brief summary"
* git commit
* bump setup.py version onto n+1 dev
* git commit
* git push

"""
