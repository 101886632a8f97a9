from setuptools import setup, find_packages

setup(
    name="optail",
    version="0.1.0",
    description="Tail a MongoDB replica set oplog to the terminal",
    author="PinguPower",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["optail", "optail.*"]),
    install_requires=[
        "pymongo>=4.0.0",
        "python-dotenv>=0.20.0",
        "pyyaml>=6.0",
        "structlog>=22.1.0",
        "colorama>=0.4.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "mongomock>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "optail=optail.__main__:main",
        ],
    },
    python_requires=">=3.8",
)
