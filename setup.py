from setuptools import setup, find_packages

setup(
    name="formlet",
    version="0.1.0",
    description="Composable form validation and rendering",
    author="Formlet Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "libsass",
        "structlog",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
