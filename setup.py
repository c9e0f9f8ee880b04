from setuptools import find_packages, setup

setup(
    name="typedpipe",
    version="0.1.0",
    description="typedpipe - function pipelines checked against their annotations",
    python_requires=">3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "typeguard>=4",
        "typing_extensions>=4.8",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
