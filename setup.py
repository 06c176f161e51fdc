from setuptools import setup, find_packages

setup(
    name="etherpad-lite-client",
    version="0.1.0",
    description="Typed Python client for the Etherpad Lite HTTP JSON API",
    packages=find_packages(include=["etherpad_lite", "etherpad_lite.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "requests-mock>=1.11",
            "vcrpy>=5.0",
            "pytest-socket>=0.6",
        ],
    },
    license="MIT",
)
