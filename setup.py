from setuptools import setup, find_packages

setup(
    name="platformq-margin-auth",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "web3>=6.5.0",
        "eth-account>=0.9.0",
        "eth-utils>=2.1.0",
        "eth-abi>=4.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    python_requires=">=3.9",
    author="PlatformQ Team",
    description="Loan offering and exchange order signing for the PlatformQ margin trading protocol",
)
