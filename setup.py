'''
wsdfeat installation
'''

from setuptools import setup, find_packages

setup(name="wsdfeat",
      version="0.1",
      description="feature extraction and sparse encoding for "
                  "word sense classifiers",
      packages=find_packages(exclude=["scripts",
                                      "experiments",
                                      "tests"]),
      python_requires=">=3.6",
      install_requires=['joblib',
                        'numpy',
                        'scikit-learn',
                        'scipy >= 0.14.0',
                        'tabulate'],
      extras_require={'test': ['pytest']})
