from setuptools import find_packages, setup

setup(
  name="ecc256k1",
  version="0.1.0",
  description="secp256k1 elliptic curve arithmetic, ECDSA, ECDH and BIP-340 Schnorr in plain Python",
  long_description=open("README.md").read(),
  long_description_content_type="text/markdown",
  packages=find_packages(exclude=["tests"]),
  python_requires=">=3.9",
  classifiers=[
    "Programming Language :: Python :: 3",
    "License :: OSI Approved :: MIT License",
    "Operating System :: OS Independent",
    "Topic :: Security :: Cryptography",
  ],
  install_requires=[
    "colorama>=0.4",
    "cryptography>=35",
  ],
  extras_require={
    "test": ["pytest", "pytest-sugar", "pytest-mock", "coverage", "mypy", "bandit"],
    "dev": ["tox", "isort", "yapf"],
  },
  entry_points=dict(
    console_scripts=["ecc256k1 = ecc256k1.__main__:main"],
  ),
)
