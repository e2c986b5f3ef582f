from setuptools import setup, find_packages

setup(
    name="bufwords",
    version="0.1.0",
    description="bufwords — language server completing words already present in the open buffer",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pygls>=1.3,<2",
        "lsprotocol>=2023.0.0",
        "regex",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "bufwords=bufwords.main:main",
        ],
    },
)
