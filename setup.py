"""
acealign setup: acealign aligns span annotations of the ACE corpus with
tokenized text and builds annotation graphs
"""

from setuptools import setup, find_packages
import glob
import os

REQS = [
    'frozendict',
    'tabulate',
    'nltk >= 3.0.0',
]

TEST_REQS = [
    'pytest',
]


setup(name='acealign',
      version='0.1',
      packages=find_packages(),
      scripts=[f for f in glob.glob('scripts/*') if not os.path.isdir(f)],
      install_requires=REQS,
      extras_require={'test': TEST_REQS})
