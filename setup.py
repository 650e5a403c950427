from setuptools import setup, find_packages

setup(
    name="cbe-sms-ledger-backend",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.0.0",
        "python-dateutil>=2.8.2",
    ],
    extras_require={
        "local": [
            "boto3>=1.26.0",
            "botocore>=1.29.0",
        ],
        "dev": [
            "boto3>=1.26.0",
            "moto>=5.0.0",
            "mypy>=1.0.0",
            "types-boto3>=1.0.0",
            "types-python-dateutil>=2.8.0",
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.0.0",
            "flake8>=6.0.0"
        ]
    },
    python_requires=">=3.9",
)
