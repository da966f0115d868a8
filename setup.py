from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="reportagg",
    version="0.1.0",
    description="Consolidate per-gateway test reports into a single summary.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"reportagg.schemas": ["*.json"]},
    python_requires=">=3.10",
    install_requires=["jsonschema>=4", "PyYAML>=6"],
    extras_require={"test": ["pytest"]},
    tests_require=["pytest"],
    entry_points={"console_scripts": ["reportagg=reportagg.cli:main"]},
)
