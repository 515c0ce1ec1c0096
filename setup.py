import ast
import re
from setuptools import setup


def version():
    pyfile = "ocfreader/__init__.py"
    with open(pyfile) as fp:
        data = fp.read()

    match = re.search(r"__version_info__ = (\(.*\))", data)
    assert match, f"cannot find version in {pyfile}"
    vinfo = ast.literal_eval(match.group(1))
    return ".".join(str(v) for v in vinfo)


setup(
    name="ocfreader",
    version=version(),
    description="Streaming reader for AVRO object container files",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    license="MIT",
    packages=["ocfreader", "ocfreader.io"],
    zip_safe=False,
    entry_points={
        "console_scripts": [
            "ocfreader = ocfreader.__main__:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires=">=3.8",
    extras_require={
        "codecs": ["cramjam", "zstandard"],
        "snappy": ["cramjam"],
        "zstandard": ["zstandard"],
        "tests": ["pytest", "cramjam", "zstandard"],
    },
    package_data={"ocfreader": ["py.typed"]},
)
