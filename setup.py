from setuptools import setup, find_packages

setup(
    name="cmo-simulator",
    version="0.1.0",
    description="Marketing mix response engine and quarterly CMO campaign simulator",
    author="adamfilli",
    packages=find_packages(include=["cmosimulator", "cmosimulator.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.10",
)
