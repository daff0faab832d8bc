import setuptools

with open("README.md", "r") as f:
    long_description = f.read()

setuptools.setup(
    name="conerefine",
    version="0.1.0",
    author="",
    author_email="",
    description="Refinement of cone triangulations into unimodular triangulations.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    license="GNU General Public License (GPL)",
    python_requires='>=3.9',
    install_requires=["numpy", "python-flint", "joblib"],
    extras_require={"test": ["pytest"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU General Public License (GPL)",
        "Operating System :: OS Independent",
    ]
)
