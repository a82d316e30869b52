PACKAGE_NAME = "biorecords"
VERSION = "0.1.0"
LICENSE = 'BSD (3-clause)'
AUTHOR = "biorecords developers"
AUTHOR_EMAIL = "biorecords@users.noreply.github.com"
MAINTAINER = AUTHOR
MAINTAINER_EMAIL = AUTHOR_EMAIL
DESCRIPTION = "Streaming codecs for protein entries, sequencing reads and mass spectra"

with open("README.md") as fin:
    LONG_DESCRIPTION = fin.read()
LONG_DESCRIPTION_CONTENT_TYPE = "text/markdown"

CLASSIFIERS = [
    "License :: OSI Approved :: BSD License",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
    "Topic :: Scientific/Engineering :: Chemistry",
]

PYTHON_REQUIRES = ">=3.9"

INSTALL_REQUIRES = [
    "Cerberus>=1.3",
    "numpy>=1.22",
    "pandas>=1.5",
    "pydantic>=2.0",
    "requests",
]

EXTRAS_REQUIRE = {"test": ["pytest"]}

if __name__ == "__main__":
    from setuptools import setup, find_packages
    from sys import version_info

    if version_info[:2] < (3, 9):
        msg = "biorecords requires Python >= 3.9."
        raise RuntimeError(msg)

    setup(name=PACKAGE_NAME,
          version=VERSION,
          author=AUTHOR,
          author_email=AUTHOR_EMAIL,
          maintainer=MAINTAINER,
          maintainer_email=MAINTAINER_EMAIL,
          license=LICENSE,
          description=DESCRIPTION,
          long_description=LONG_DESCRIPTION,
          long_description_content_type=LONG_DESCRIPTION_CONTENT_TYPE,
          classifiers=CLASSIFIERS,
          package_dir={"": "src"},
          packages=find_packages("src"),
          python_requires=PYTHON_REQUIRES,
          install_requires=INSTALL_REQUIRES,
          extras_require=EXTRAS_REQUIRE,
          include_package_data=True)
