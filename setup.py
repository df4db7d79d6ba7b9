from setuptools import setup, find_packages

setup(
    name="mkdocs-godoc",
    version="0.3.0",
    description="MkDocs plugin rendering Go doc comments as Markdown",
    keywords="mkdocs godoc go golang documentation markdown python",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "mkdocs>=1.4",
        "Markdown>=3.4",
        "linkify-it-py>=2.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers = [
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Documentation",
        "Topic :: Software Development :: Documentation",
        "Framework :: MkDocs",
    ],
    entry_points={
        "mkdocs.plugins": [
            "godoc = mkdocs_godoc.plugin:GodocPlugin",
        ],
    },
)
