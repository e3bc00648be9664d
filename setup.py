from setuptools import setup, find_packages
import os

with open(os.path.join(os.path.dirname(__file__), "requirements.txt")) as f:
    requirements = f.read().splitlines()

setup(
    name="ridepool",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["server", "dev_server"],
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0", "responses>=0.23"],
    },
    entry_points={
        "console_scripts": [
            "ridepool=ridepool.cli_module.cli:main",
            "ridepool-server=server:cli",
        ],
    },
)
