from __future__ import annotations

from setuptools import find_packages, setup


install_requires = [
    "boto3>=1.28",
    "botocore>=1.31",
    "SQLAlchemy>=2.0",
]

extras_require = {
    "test": [
        "pytest>=7.0",
    ],
}

setup(
    name="contractform",
    version="0.1.0",
    description="Storage layer for student academic contracts on DynamoDB and SQL databases",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "contractform=contractform.cli:main",
        ],
    },
)
