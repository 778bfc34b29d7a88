""" btchd build script for setuptools.

"""

from setuptools import find_packages, setup  # type: ignore

import btchd

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=btchd.name,
    version=btchd.__version__,
    license=btchd.__license__,
    author=btchd.__author__,
    author_email=btchd.__author_email__,
    description="BIP32 hierarchical deterministic keys and legacy bitcoin sighash",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"btchd": ["_data/*.json"]},
    install_requires=["dataclasses-json"],
    extras_require={"test": ["pytest"]},
    keywords=(
        "bitcoin bip32 hd-wallet extended-keys xprv xpub base58check "
        "secp256k1 sighash transaction"
    ),
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
