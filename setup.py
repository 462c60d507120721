# setup.py
from setuptools import setup, find_packages

setup(
    name="savage",
    version="0.1.0",
    description="Exact symbolic evaluation of mathematical expressions",
    packages=find_packages(include=["savage", "savage.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["savage=savage.__main__:main"],
    },
    zip_safe=False,
)
